"""Geometry module for shape primitives.

This module provides the geometric primitives and their intersection tests:

Components:
    sphere: Sphere primitive with near-root ray-sphere intersection
    plane: Infinite plane primitive with ray-plane intersection

All intersection routines are Taichi functions (@ti.func) and share the
same calling pattern:
    record = hit_shape(ray_origin, ray_direction, shape, t_min, t_max)

A hit only counts when t_min < t < t_max; the tracer passes t_min = 0 so that
hits behind the ray origin are rejected.
"""

from .plane import PARALLEL_EPSILON, Plane, hit_plane, make_plane
from .sphere import (
    TANGENT_EPSILON,
    HitRecord,
    Sphere,
    hit_sphere,
    make_miss_hit_record,
    make_sphere,
)

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "make_sphere",
    "make_miss_hit_record",
    "TANGENT_EPSILON",
    "Plane",
    "hit_plane",
    "make_plane",
    "PARALLEL_EPSILON",
]
