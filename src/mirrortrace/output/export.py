"""Image export for rendered images.

Rendered images are linear float arrays of shape (H, W, 3). On output each
channel becomes int(channel * 255), truncated toward zero. Values are not
clamped by default: a pixel brighter than 1.0 produces channel values above
255, and writers that store bytes (PNG) wrap them modulo 256. Passing
clamp=True clips to [0, 255] first, which changes the image relative to the
unclamped output.

Supported formats:
    - PPM, plain-text "P3" variant
    - PNG (8-bit via Pillow)

Example:
    >>> from mirrortrace.output.export import to_pixel_values, write_ppm
    >>> pixels = to_pixel_values(image)
    >>> write_ppm(pixels, "output.ppm")
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)

PPM_MAX_VALUE = 255


def _check_image_shape(image: np.ndarray) -> None:
    """Raise unless the array is a (H, W, 3) image."""
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an image of shape (H, W, 3), got {image.shape}")


def to_pixel_values(
    image: npt.NDArray[np.floating],
    *,
    clamp: bool = False,
) -> npt.NDArray[np.int64]:
    """Convert a linear float image to integer channel values.

    Args:
        image: Linear image array of shape (H, W, 3).
        clamp: Clip the result to [0, 255]. Off by default.

    Returns:
        Integer array of shape (H, W, 3) holding trunc(channel * 255).

    Raises:
        ValueError: If the array is not an (H, W, 3) image.
    """
    _check_image_shape(image)
    pixels = np.trunc(image.astype(np.float64) * PPM_MAX_VALUE).astype(np.int64)
    if clamp:
        pixels = np.clip(pixels, 0, PPM_MAX_VALUE)
    return pixels


def format_ppm(pixels: npt.NDArray[np.integer]) -> str:
    """Format integer pixels as a plain-text PPM document.

    The header is three lines ("P3", "width height", "255"), followed by one
    line per image row, top row first, each holding whitespace-separated
    R G B triples.

    Args:
        pixels: Integer array of shape (H, W, 3).

    Returns:
        The PPM text, ending with a newline.
    """
    _check_image_shape(pixels)
    height, width, _ = pixels.shape
    lines = ["P3", f"{width} {height}", str(PPM_MAX_VALUE)]
    for row in pixels:
        lines.append(" ".join(f"{r} {g} {b}" for r, g, b in row.tolist()))
    return "\n".join(lines) + "\n"


def write_ppm(pixels: npt.NDArray[np.integer], filepath: str | Path) -> None:
    """Write integer pixels to a plain-text PPM file.

    Args:
        pixels: Integer array of shape (H, W, 3), e.g. from to_pixel_values().
        filepath: Output file path.
    """
    path = Path(filepath)
    path.write_text(format_ppm(pixels))
    logger.info(f"Wrote {pixels.shape[1]}x{pixels.shape[0]} PPM to {path}")


def image_to_uint8(
    image: npt.NDArray[np.floating],
    *,
    clamp: bool = False,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to bytes.

    Unclamped channel values outside [0, 255] wrap modulo 256.
    """
    pixels = to_pixel_values(image, clamp=clamp)
    return (pixels % 256).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.floating],
    filepath: str | Path,
    *,
    clamp: bool = False,
) -> None:
    """Save a linear float image as an 8-bit PNG file.

    Args:
        image: Linear image array of shape (H, W, 3).
        filepath: Output file path (should end in .png).
        clamp: Clip to [0, 255] before conversion instead of wrapping.
    """
    image_uint8 = image_to_uint8(image, clamp=clamp)

    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)
    logger.info(f"Wrote {image_uint8.shape[1]}x{image_uint8.shape[0]} PNG to {filepath}")
