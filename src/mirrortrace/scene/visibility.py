"""Shadow queries between surface points and point lights.

A point is in shadow with respect to a light when any primitive lies on the
segment between them. The shadow ray starts SHADOW_EPSILON along the light
direction to keep the surface the point sits on from occluding itself.
"""

import taichi as ti
import taichi.math as tm

from mirrortrace.core.ray import length, normalize
from mirrortrace.scene.intersection import intersect_scene_any

vec3 = tm.vec3

# Offset of the shadow ray origin toward the light
SHADOW_EPSILON = 1e-3


@ti.func
def is_shadowed(point: vec3, light_position: vec3) -> ti.i32:
    """Test whether a light is occluded as seen from a surface point.

    Args:
        point: The surface point being shaded.
        light_position: The position of the point light.

    Returns:
        1 if some primitive is hit strictly before the light, 0 otherwise.
    """
    light_dir = normalize(light_position - point)
    origin = point + SHADOW_EPSILON * light_dir
    light_distance = length(light_position - origin)
    return intersect_scene_any(origin, light_dir, 0.0, light_distance)
