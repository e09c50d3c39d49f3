"""Local diffuse shading with hard shadows.

The local color at a surface point is a fold over all lights:

    local = sum over unoccluded lights of intensity * max(0, N.L) * base_color

where L is the unit direction from the point toward the light. Occluded
lights contribute nothing, giving hard shadows with no penumbra. Lights are
not attenuated by distance.

The base color is the material color for spheres and the procedural
checkerboard for planes.
"""

import taichi as ti
import taichi.math as tm

from mirrortrace.core.ray import normalize
from mirrortrace.materials.material import checkerboard, get_material_color
from mirrortrace.scene.intersection import PRIMITIVE_PLANE, SceneHitRecord
from mirrortrace.scene.lights import light_intensities, light_positions, num_lights
from mirrortrace.scene.visibility import is_shadowed

vec3 = tm.vec3


@ti.func
def surface_color(rec: SceneHitRecord) -> vec3:
    """Base color of the hit surface.

    Args:
        rec: A scene hit record with hit == 1.

    Returns:
        The checkerboard color for planes, the material color otherwise.
    """
    color = get_material_color(rec.material_id)
    if rec.kind == PRIMITIVE_PLANE:
        color = checkerboard(rec.point)
    return color


@ti.func
def shade_local(point: vec3, normal: vec3, base_color: vec3) -> vec3:
    """Sum the diffuse contribution of every light that reaches the point.

    Args:
        point: The surface point.
        normal: The unit surface normal at the point.
        base_color: The surface color at the point.

    Returns:
        The local (non-reflected) color.
    """
    result = vec3(0.0, 0.0, 0.0)

    for i in range(num_lights[None]):
        light_position = light_positions[i]
        if is_shadowed(point, light_position) == 0:
            light_dir = normalize(light_position - point)
            cos_theta = ti.max(0.0, tm.dot(normal, light_dir))
            result += light_intensities[i] * cos_theta * base_color

    return result
