"""Pinhole camera model and fixed-grid sub-pixel sampling.

The camera sits at a fixed position and looks down +z with no rotation. A
continuous pixel coordinate (px, py) in a width x height image maps to the
camera-space direction (u, v, 1) with

    u = (2 * px / width - 1) * (width / height) * tan(fov / 2)
    v = (1 - 2 * py / height) * tan(fov / 2)

so row 0 is the top of the image and maps to the highest world y. The ray
built from that direction is normalized.

Anti-aliasing samples every pixel on an n x n grid at offsets (k + 0.5) / n,
which is 0.25 and 0.75 for the default n = 2.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(position=(0.0, 0.0, -5.0), fov=60.0))
    >>> # Use get_ray(px, py, width, height) within a Taichi kernel
"""

import math
from dataclasses import dataclass

import taichi as ti

from mirrortrace.core.ray import Ray, make_ray, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for the fixed, axis-aligned pinhole camera.

    Attributes:
        position: Camera position in world space (x, y, z).
        fov: Field of view in degrees, applied to the image height and
            stretched by the aspect ratio horizontally. Must lie in (0, 180).
    """

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fov: float = 60.0

    def __post_init__(self) -> None:
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view {self.fov} must lie in (0, 180) degrees")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_tan_half_fov = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: PinholeCamera) -> None:
    """Store the camera position and projection scale in device fields.

    Must be called from Python (not from within a Taichi kernel) before
    rendering.

    Args:
        camera: Camera configuration.
    """
    _camera_origin[None] = [camera.position[0], camera.position[1], camera.position[2]]
    _tan_half_fov[None] = math.tan(math.radians(camera.fov) / 2.0)


def get_camera_info() -> dict[str, object]:
    """Get the current camera state for debugging."""
    origin = _camera_origin[None]
    return {
        "origin": (float(origin[0]), float(origin[1]), float(origin[2])),
        "tan_half_fov": float(_tan_half_fov[None]),
    }


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(px: ti.f32, py: ti.f32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a continuous pixel coordinate.

    Args:
        px: Horizontal pixel coordinate, 0 at the left edge, width at the right.
        py: Vertical pixel coordinate, 0 at the top edge, height at the bottom.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A ray from the camera position with normalized direction (u, v, 1).
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    scale = _tan_half_fov[None]
    aspect = w / h

    u = (2.0 * px / w - 1.0) * aspect * scale
    v = (1.0 - 2.0 * py / h) * scale

    return make_ray(_camera_origin[None], vec3(u, v, 1.0))


@ti.func
def subpixel_offset(index: ti.i32, samples_per_axis: ti.i32) -> ti.f32:
    """Offset of the index-th sample along one pixel axis, in [0, 1)."""
    return (ti.cast(index, ti.f32) + 0.5) / ti.cast(samples_per_axis, ti.f32)
