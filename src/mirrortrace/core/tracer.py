"""Depth-bounded recursive ray tracer and render target.

The color of a ray is defined recursively by trace(ray, depth):

    depth > max_depth          -> background
    no hit                     -> background
    reflectivity r == 0        -> local
    reflectivity r > 0         -> local * (1 - r) + trace(reflected, depth + 1) * r

where local is the diffuse, shadowed color of the hit point and the reflected
ray leaves the hit point along R = D - 2(D.N)N, offset REFLECTION_EPSILON
along the normal on the side R points to. For front-side hits that is +N;
a plane hit from behind offsets along -N instead of always along +N, so the
reflected ray does not restart on the far side of the plane.

Taichi functions are inlined and cannot call themselves, so trace() unrolls
the recursion into a loop over depth. The loop carries the product of the
reflectivities seen so far (weight); each level adds weight * (1 - r) * local
and a ray still bouncing after max_depth adds weight * background. This sums
to exactly the recursive definition.

Every pixel is the equal-weight average of an n x n grid of sub-pixel
samples. Rendering runs as a Taichi kernel whose outer loop is parallel over
pixels; each pixel only writes its own cell of the color buffer.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.camera.pinhole import setup_camera
    >>> from mirrortrace.core.tracer import (
    ...     RenderSettings, configure_tracer, render_rows, setup_render_target
    ... )
    >>> from mirrortrace.scene.manager import load_scene
    >>> from mirrortrace.scene.reference import create_reference_scene
    >>>
    >>> scene, camera = create_reference_scene()
    >>> load_scene(scene)
    >>> setup_camera(camera)
    >>> configure_tracer(RenderSettings(max_depth=5))
    >>> setup_render_target(320, 240)
    >>> render_rows(0, 240)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from mirrortrace.camera.pinhole import get_ray, subpixel_offset
from mirrortrace.core.ray import make_ray, normalize, reflect
from mirrortrace.core.shading import shade_local, surface_color
from mirrortrace.materials.material import get_material_reflectivity
from mirrortrace.scene.intersection import intersect_scene

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default recursion bound: rays deeper than this return the background
DEFAULT_MAX_DEPTH = 5

# Default anti-aliasing grid: 2 x 2 samples at offsets 0.25 and 0.75
DEFAULT_SAMPLES_PER_AXIS = 2

# Offset of reflected ray origins along the surface normal
REFLECTION_EPSILON = 1e-3

# Hits must satisfy T_MIN < t < T_MAX
T_MIN = 0.0
T_MAX = 1e30

# Color returned for rays that hit nothing or exceed the depth bound
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RenderSettings:
    """Tracer configuration.

    Attributes:
        max_depth: Deepest reflection level that is still shaded. The primary
            ray is depth 0; a ray at depth max_depth + 1 returns the
            background.
        samples_per_axis: Side of the square sub-pixel sampling grid.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    samples_per_axis: int = DEFAULT_SAMPLES_PER_AXIS

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.samples_per_axis < 1:
            raise ValueError(
                f"samples_per_axis must be at least 1, got {self.samples_per_axis}"
            )


_max_depth = ti.field(dtype=ti.i32, shape=())
_samples_per_axis = ti.field(dtype=ti.i32, shape=())
_tracer_configured = ti.field(dtype=ti.i32, shape=())


def configure_tracer(settings: RenderSettings | None = None) -> None:
    """Store the tracer settings in device fields.

    Args:
        settings: The settings to use. Defaults to RenderSettings().
    """
    if settings is None:
        settings = RenderSettings()
    _max_depth[None] = settings.max_depth
    _samples_per_axis[None] = settings.samples_per_axis
    _tracer_configured[None] = 1


def get_tracer_settings() -> RenderSettings:
    """Read back the settings currently stored on the device."""
    _check_tracer_configured()
    return RenderSettings(
        max_depth=int(_max_depth[None]),
        samples_per_axis=int(_samples_per_axis[None]),
    )


def _check_tracer_configured() -> None:
    """Raise if configure_tracer() has not been called."""
    if _tracer_configured[None] == 0:
        raise RuntimeError("Tracer not configured. Call configure_tracer() first.")


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color buffer indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image dimensions and clear the color buffer.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum
            supported size.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Tracing Core
# =============================================================================


@ti.func
def _offset_ray_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Push a reflected ray origin off the surface, on the side it leaves toward."""
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + REFLECTION_EPSILON * offset_dir


@ti.func
def trace(origin: vec3, direction: vec3) -> vec3:
    """Compute the color seen along a ray.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.

    Returns:
        The blended local and reflected color (RGB), unclamped.
    """
    ray_origin = origin
    ray_direction = direction

    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0

    # Taichi doesn't support break in ti.func loops
    active = 1

    for _ in range(_max_depth[None] + 1):
        if active == 1:
            rec = intersect_scene(ray_origin, ray_direction, T_MIN, T_MAX)

            if rec.hit == 0:
                color += weight * BACKGROUND_COLOR
                active = 0
            else:
                local = shade_local(rec.point, rec.normal, surface_color(rec))
                reflectivity = get_material_reflectivity(rec.material_id)

                if reflectivity > 0.0:
                    color += weight * (1.0 - reflectivity) * local
                    weight *= reflectivity
                    ray_direction = normalize(reflect(ray_direction, rec.normal))
                    ray_origin = _offset_ray_origin(rec.point, rec.normal, ray_direction)
                else:
                    color += weight * local
                    active = 0

    # Still bouncing past the depth bound
    if active == 1:
        color += weight * BACKGROUND_COLOR

    return color


@ti.func
def render_pixel_color(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Average the sub-pixel samples of one pixel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The equal-weight mean of the n x n sample colors.
    """
    n = _samples_per_axis[None]
    total = vec3(0.0, 0.0, 0.0)

    for sy in range(n):
        for sx in range(n):
            px = ti.cast(pixel_i, ti.f32) + subpixel_offset(sx, n)
            py = ti.cast(pixel_j, ti.f32) + subpixel_offset(sy, n)
            ray = get_ray(px, py, width, height)
            total += trace(ray.origin, ray.direction)

    return total / ti.cast(n * n, ti.f32)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(width: ti.i32, height: ti.i32, row_start: ti.i32, row_end: ti.i32):
    """Render the rows [row_start, row_end) into the color buffer."""
    for i, j in ti.ndrange(width, (row_start, row_end)):
        _color_buffer[i, j] = render_pixel_color(i, j, width, height)


# Result slot for the single-pixel and single-ray kernels
_single_result = ti.Vector.field(3, dtype=ti.f32, shape=())


# The per-ray loops must not become the parallel top-level loop of these
# kernels, so the work sits inside a one-iteration outer loop.
@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32):
    """Render one pixel into _single_result without touching the color buffer."""
    for _ in range(1):
        _single_result[None] = render_pixel_color(pixel_i, pixel_j, width, height)


@ti.kernel
def _trace_single_ray(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
    """Trace one ray given by its components into _single_result."""
    for _ in range(1):
        ray = make_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))
        _single_result[None] = trace(ray.origin, ray.direction)


# =============================================================================
# Public Rendering API
# =============================================================================


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace a single ray against the loaded scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized before tracing; must be non-zero).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If the tracer has not been configured.
    """
    _check_tracer_configured()
    _trace_single_ray(origin[0], origin[1], origin[2], direction[0], direction[1], direction[2])
    color = _single_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Render a single anti-aliased pixel of the current render target.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If the render target or tracer has not been set up.
    """
    _check_render_target_initialized()
    _check_tracer_configured()

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_i, pixel_j, width, height)
    color = _single_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the color buffer.

    Args:
        row_start: First row to render (inclusive).
        row_end: Row to stop at (exclusive), at most the image height.

    Raises:
        RuntimeError: If the render target or tracer has not been set up.
        ValueError: If the band lies outside the image.
    """
    _check_render_target_initialized()
    _check_tracer_configured()

    width, height = get_image_dimensions()
    if not 0 <= row_start <= row_end <= height:
        raise ValueError(f"Row band [{row_start}, {row_end}) is outside [0, {height})")
    if row_start == row_end:
        return

    _render_rows(width, height, row_start, row_end)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the rendered image as a NumPy array.

    Values are linear colors, not clamped. Row 0 is the top of the image.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float32.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3)
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))

    return np.ascontiguousarray(image, dtype=np.float32)
