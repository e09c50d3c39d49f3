"""Infinite plane primitive with ray-plane intersection.

A plane is a point P on the plane plus a unit normal N. A ray O + tD meets
the plane at

    t = ((P - O).N) / (D.N)

When the ray runs nearly parallel to the plane (|D.N| <= PARALLEL_EPSILON)
the division would blow up, so the test reports no hit instead. A
denominator of exactly PARALLEL_EPSILON is a miss.

The reported normal is always the stored normal, whichever side the ray
arrives from.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.geometry.plane import Plane, hit_plane
    >>> # Floor at y = -1 facing up
    >>> floor = Plane(point=ti.math.vec3(0, -1, 0), normal=ti.math.vec3(0, 1, 0))
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord, make_miss_hit_record

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with |D.N| at or below this are treated as parallel to the plane
PARALLEL_EPSILON = 1e-6


@ti.dataclass
class Plane:
    """An infinite plane defined by a point and a unit normal.

    Attributes:
        point: Any point lying on the plane (vec3).
        normal: The unit normal of the plane (vec3).
    """

    point: vec3
    normal: vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test intersection against.
        t_min: The hit distance must be strictly greater than this.
        t_max: The hit distance must be strictly less than this.

    Returns:
        A HitRecord containing intersection information. Check the hit field
        to determine if an intersection occurred.
    """
    denom = tm.dot(plane.normal, ray_direction)

    result = make_miss_hit_record()

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = tm.dot(plane.point - ray_origin, plane.normal) / denom

        if t > t_min and t < t_max:
            result = HitRecord(
                hit=1,
                t=t,
                point=ray_origin + t * ray_direction,
                normal=plane.normal,
            )

    return result


@ti.func
def make_plane(point: vec3, normal: vec3) -> Plane:
    """Create a plane from a point and unit normal within a Taichi kernel."""
    return Plane(point=point, normal=normal)
