"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    shading: Diffuse local shading with hard shadows
    tracer: Depth-bounded reflection tracer, sampling and render kernels
    renderer: Band-by-band Renderer class and render_scene()

All compute-intensive operations use Taichi kernels; the outer loop over
pixels runs in parallel.
"""

from .ray import (
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec3,
)

# Note: shading, tracer and renderer are NOT imported here to avoid circular imports.
# Import directly from mirrortrace.core.tracer or mirrortrace.core.renderer when needed.

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
]
