"""Whitted-style ray tracer built on Taichi.

This package renders scenes of spheres, checkerboard planes and point lights
with diffuse shading, hard shadows and mirror reflection:
- Depth-bounded reflection with linear blending of local and reflected color
- Binary shadow rays toward every point light
- Fixed-grid supersampling for anti-aliasing
- Per-pixel parallel rendering through Taichi kernels

Subpackages:
    core: Ray and vector utilities, shading, the tracer and render loop
    geometry: Sphere and plane primitives with intersection tests
    materials: Material storage and the procedural checkerboard
    scene: Scene value objects, device upload, intersection and visibility
    camera: Pinhole camera and sub-pixel sampling
    output: PPM and PNG image writers
"""

__version__ = "0.1.0"
