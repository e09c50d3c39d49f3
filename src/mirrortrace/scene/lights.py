"""Point light storage.

Lights are idealized points with a scalar intensity: no falloff with
distance, no area and therefore no soft shadows.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_light(position: vec3, intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: World-space position of the light.
        intensity: Scalar intensity (non-negative).

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If the intensity is negative.
    """
    if intensity < 0.0:
        raise ValueError(f"Light intensity {intensity} is negative")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])
