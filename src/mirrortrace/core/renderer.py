"""Band-by-band renderer with progress reporting.

This module wraps the tracer kernels in a convenient interface:
- Rendering the image in horizontal bands of scanlines
- Progress callbacks or a generator for UI updates
- Float image, 0-255 pixel grid, PPM and PNG output

Within a band Taichi parallelizes over pixels; bands run one after another so
progress can be reported between them.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mirrortrace.core.renderer import render_scene
    >>> from mirrortrace.scene.reference import create_reference_scene
    >>>
    >>> scene, camera = create_reference_scene()
    >>> image = render_scene(scene, camera, 320, 240)
    >>> image.shape
    (240, 320, 3)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from pathlib import Path

import numpy as np
import numpy.typing as npt

from mirrortrace.camera.pinhole import PinholeCamera, setup_camera
from mirrortrace.core.tracer import (
    RenderSettings,
    clear_render_target,
    configure_tracer,
    get_image_numpy,
    render_rows,
    setup_render_target,
)
from mirrortrace.output.export import save_png_from_array, to_pixel_values, write_ppm
from mirrortrace.scene.manager import load_scene
from mirrortrace.scene.model import Scene

logger = logging.getLogger(__name__)

# Callback receives (rows_rendered, total_rows)
ProgressCallback = Callable[[int, int], None]

DEFAULT_BAND_HEIGHT = 64


class Renderer:
    """Renders the loaded scene into a fixed-size image.

    The renderer owns the image dimensions and settings and delegates to the
    tracer's global color buffer (a Taichi field). The scene and camera must
    already be uploaded with load_scene() and setup_camera(), or use
    render_scene() which does both.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        settings: The tracer settings used for every render.
    """

    def __init__(self, width: int, height: int, settings: RenderSettings | None = None) -> None:
        """Initialize the renderer.

        Args:
            width: Image width in pixels (max 2048).
            height: Image height in pixels (max 2048).
            settings: Tracer settings. Defaults to RenderSettings().

        Raises:
            ValueError: If dimensions are not positive or exceed the maximum
                supported size.
        """
        self._width = width
        self._height = height
        self._settings = settings if settings is not None else RenderSettings()
        self._rows_rendered = 0
        setup_render_target(width, height)
        configure_tracer(self._settings)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def settings(self) -> RenderSettings:
        """Get the tracer settings."""
        return self._settings

    @property
    def rows_rendered(self) -> int:
        """Number of rows rendered since the last reset."""
        return self._rows_rendered

    @property
    def is_complete(self) -> bool:
        """Whether every row has been rendered."""
        return self._rows_rendered >= self._height

    def reset(self) -> None:
        """Clear the color buffer so the next render starts from scratch."""
        clear_render_target()
        self._rows_rendered = 0

    def render(
        self,
        band_height: int = DEFAULT_BAND_HEIGHT,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float32]:
        """Render the whole image.

        Args:
            band_height: Number of rows rendered per kernel launch.
            callback: Optional callback called after each band.
                Receives (rows_rendered, total_rows).

        Returns:
            The rendered float image of shape (height, width, 3).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> image = renderer.render(band_height=32, callback=progress)
        """
        start = time.perf_counter()
        for done, total in self.render_bands(band_height):
            if callback is not None:
                callback(done, total)
        elapsed = time.perf_counter() - start
        logger.info(f"Rendered {self._width}x{self._height} in {elapsed:.3f}s")
        return self.get_image_numpy()

    def render_bands(
        self,
        band_height: int = DEFAULT_BAND_HEIGHT,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        A generator alternative to render() with callbacks; stopping the
        iteration early leaves the remaining rows black. The shared render
        target is resized to this renderer's dimensions first, so several
        Renderer instances can take turns.

        Args:
            band_height: Number of rows rendered per kernel launch.

        Yields:
            Tuple of (rows_rendered, total_rows).

        Raises:
            ValueError: If band_height is not positive.
        """
        if band_height <= 0:
            raise ValueError(f"band_height must be positive, got {band_height}")

        # The render target and tracer settings are shared by every Renderer
        setup_render_target(self._width, self._height)
        configure_tracer(self._settings)
        self._rows_rendered = 0

        for row_start in range(0, self._height, band_height):
            row_end = min(row_start + band_height, self._height)
            render_rows(row_start, row_end)
            self._rows_rendered = row_end
            logger.debug(f"Rendered rows {row_start}-{row_end} of {self._height}")
            yield (self._rows_rendered, self._height)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the rendered linear image of shape (height, width, 3)."""
        return get_image_numpy()

    def get_pixels(self, clamp: bool = False) -> npt.NDArray[np.int64]:
        """Get the image as integer channel values (channel * 255, truncated).

        Args:
            clamp: Clip to [0, 255] before returning. Off by default, so
                over-bright pixels keep values above 255.
        """
        return to_pixel_values(self.get_image_numpy(), clamp=clamp)

    def save_ppm(self, filepath: str | Path, clamp: bool = False) -> None:
        """Save the rendered image as a plain-text PPM file."""
        write_ppm(self.get_pixels(clamp=clamp), filepath)

    def save_png(self, filepath: str | Path, clamp: bool = False) -> None:
        """Save the rendered image as an 8-bit PNG file."""
        save_png_from_array(self.get_image_numpy(), filepath, clamp=clamp)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"max_depth={self._settings.max_depth}, rows_rendered={self.rows_rendered})"
        )


def render_scene(
    scene: Scene,
    camera: PinholeCamera,
    width: int,
    height: int,
    settings: RenderSettings | None = None,
    *,
    band_height: int = DEFAULT_BAND_HEIGHT,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float32]:
    """Upload a scene and camera, then render a full image.

    Args:
        scene: The scene to render.
        camera: The camera to render from.
        width: Image width in pixels.
        height: Image height in pixels.
        settings: Tracer settings. Defaults to RenderSettings().
        band_height: Number of rows rendered per kernel launch.
        callback: Optional progress callback, see Renderer.render().

    Returns:
        The rendered float image of shape (height, width, 3).
    """
    load_scene(scene)
    setup_camera(camera)
    renderer = Renderer(width, height, settings)
    return renderer.render(band_height=band_height, callback=callback)
