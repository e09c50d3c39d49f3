"""Sphere primitive with ray-sphere intersection.

The intersection substitutes the ray parametrization into the implicit sphere
equation |O + tD - C|^2 = r^2, giving

    t^2 + b*t + c = 0,   b = 2 D.(O - C),   c = |O - C|^2 - r^2

for a unit-length direction D. Only the near root (-b - sqrt(disc)) / 2 is
ever considered. A ray starting inside the sphere has a negative near root and
therefore reports no hit; the far root is deliberately not tried.

Tangent rays produce a discriminant that rounds to either side of zero. Any
discriminant down to -TANGENT_EPSILON is clamped to zero and counted as a hit,
so grazing rays behave the same whichever way the rounding goes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, 5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Discriminants in [-TANGENT_EPSILON, 0) are treated as tangent hits
TANGENT_EPSILON = 1e-6


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
        point: The 3D intersection point. Only valid if hit == 1.
        normal: The unit surface normal at the intersection point. Spheres
            report the outward normal, planes their stored normal.
            Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def make_miss_hit_record() -> HitRecord:
    """Create a HitRecord indicating no intersection."""
    return HitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
    )


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_min: ti.f32,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection at the near root only.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.
        t_min: The near root must be strictly greater than this (0 for a
            forward hit).
        t_max: The near root must be strictly less than this (the closest
            hit so far, or the distance to a light for shadow rays).

    Returns:
        A HitRecord containing intersection information. Check the hit field
        to determine if an intersection occurred.
    """
    oc = ray_origin - sphere.center

    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = b * b - 4.0 * c

    result = make_miss_hit_record()

    if discriminant >= -TANGENT_EPSILON:
        sqrt_d = ti.sqrt(ti.max(discriminant, 0.0))
        t = (-b - sqrt_d) * 0.5

        if t > t_min and t < t_max:
            point = ray_origin + t * ray_direction
            result = HitRecord(
                hit=1,
                t=t,
                point=point,
                normal=(point - sphere.center) / sphere.radius,
            )

    return result


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius within a Taichi kernel."""
    return Sphere(center=center, radius=radius)
