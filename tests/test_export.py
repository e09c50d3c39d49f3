"""Tests for image export.

Tests cover:
- Channel conversion by truncation, without and with clamping
- Plain-text PPM layout
- PNG output and byte wrapping of unclamped values
"""

import numpy as np
import pytest
from PIL import Image


class TestToPixelValues:
    """Tests for float to integer channel conversion."""

    def test_truncates_toward_zero(self):
        """Test channels are truncated rather than rounded."""
        from mirrortrace.output.export import to_pixel_values

        image = np.array([[[0.0, 0.5, 0.999], [1.0, 0.1, 0.0039]]], dtype=np.float32)
        pixels = to_pixel_values(image)

        assert pixels.dtype == np.int64
        # 0.5 * 255 = 127.5 and 0.999 * 255 = 254.745
        assert pixels[0, 0].tolist() == [0, 127, 254]
        assert pixels[0, 1].tolist() == [255, 25, 0]

    def test_unclamped_by_default(self):
        """Test over-bright channels keep values above 255."""
        from mirrortrace.output.export import to_pixel_values

        image = np.array([[[1.3, 2.0, 1.0]]])
        pixels = to_pixel_values(image)

        assert pixels[0, 0].tolist() == [331, 510, 255]

    def test_clamp_option(self):
        """Test clamp=True clips to [0, 255]."""
        from mirrortrace.output.export import to_pixel_values

        image = np.array([[[1.3, -0.2, 0.5]]])
        pixels = to_pixel_values(image, clamp=True)

        assert pixels[0, 0].tolist() == [255, 0, 127]

    def test_rejects_wrong_shape(self):
        """Test arrays that are not (H, W, 3) are rejected."""
        from mirrortrace.output.export import to_pixel_values

        with pytest.raises(ValueError, match="shape"):
            to_pixel_values(np.zeros((4, 4)))
        with pytest.raises(ValueError, match="shape"):
            to_pixel_values(np.zeros((4, 4, 4)))


class TestPPM:
    """Tests for the plain-text PPM writer."""

    def test_format_layout(self):
        """Test header lines and one line of triples per row, top row first."""
        from mirrortrace.output.export import format_ppm

        pixels = np.array(
            [
                [[255, 0, 0], [0, 255, 0], [0, 0, 255]],
                [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
            ]
        )
        text = format_ppm(pixels)

        assert text == (
            "P3\n"
            "3 2\n"
            "255\n"
            "255 0 0 0 255 0 0 0 255\n"
            "1 2 3 4 5 6 7 8 9\n"
        )

    def test_unclamped_values_written_verbatim(self):
        """Test values above 255 appear unchanged in the text."""
        from mirrortrace.output.export import format_ppm, to_pixel_values

        text = format_ppm(to_pixel_values(np.array([[[2.0, 0.0, 0.0]]])))

        assert text.splitlines()[3] == "510 0 0"

    def test_write_ppm(self, tmp_path):
        """Test write_ppm writes the formatted text to disk."""
        from mirrortrace.output.export import format_ppm, write_ppm

        pixels = np.zeros((2, 4, 3), dtype=np.int64)
        path = tmp_path / "image.ppm"
        write_ppm(pixels, path)

        assert path.read_text() == format_ppm(pixels)


class TestPNG:
    """Tests for 8-bit conversion and PNG output."""

    def test_image_to_uint8_wraps_unclamped(self):
        """Test unclamped values wrap modulo 256 when stored as bytes."""
        from mirrortrace.output.export import image_to_uint8

        image = np.array([[[2.0, 1.0, 0.5]]])
        result = image_to_uint8(image)

        assert result.dtype == np.uint8
        # 510 % 256 = 254
        assert result[0, 0].tolist() == [254, 255, 127]

    def test_image_to_uint8_clamped(self):
        """Test clamped conversion saturates instead of wrapping."""
        from mirrortrace.output.export import image_to_uint8

        result = image_to_uint8(np.array([[[2.0, 1.0, 0.5]]]), clamp=True)

        assert result[0, 0].tolist() == [255, 255, 127]

    def test_save_png_round_trip(self, tmp_path):
        """Test the saved PNG holds the converted bytes."""
        from mirrortrace.output.export import image_to_uint8, save_png_from_array

        image = np.random.default_rng(0).random((5, 6, 3)).astype(np.float32)
        path = tmp_path / "image.png"
        save_png_from_array(image, path)

        with Image.open(path) as img:
            assert img.size == (6, 5)
            stored = np.asarray(img)

        np.testing.assert_array_equal(stored, image_to_uint8(image))
