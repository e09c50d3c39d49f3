"""Output module for writing rendered images.

Components:
    export: Conversion to 0-255 channel values, plain-text PPM and PNG writers

Example:
    >>> from mirrortrace.output import save_png_from_array, to_pixel_values, write_ppm
    >>> write_ppm(to_pixel_values(image), "output.ppm")
    >>> save_png_from_array(image, "output.png")
"""

from .export import (
    PPM_MAX_VALUE,
    format_ppm,
    image_to_uint8,
    save_png_from_array,
    to_pixel_values,
    write_ppm,
)

__all__ = [
    "PPM_MAX_VALUE",
    "to_pixel_values",
    "image_to_uint8",
    "format_ppm",
    "write_ppm",
    "save_png_from_array",
]
