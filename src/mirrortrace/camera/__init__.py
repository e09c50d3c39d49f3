"""Camera module for primary ray generation.

Components:
    pinhole: Fixed-position pinhole camera looking down +z, and the fixed
        sub-pixel sampling grid used for anti-aliasing

Pixel coordinates use the image convention:
    x in [0, width]: left to right
    y in [0, height]: top to bottom
"""

from .pinhole import (
    PinholeCamera,
    get_camera_info,
    get_ray,
    setup_camera,
    subpixel_offset,
)

__all__ = [
    "PinholeCamera",
    "setup_camera",
    "get_camera_info",
    "get_ray",
    "subpixel_offset",
]
