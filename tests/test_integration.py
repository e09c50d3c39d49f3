"""Integration tests for the end-to-end rendering pipeline.

This module renders complete scenes from scene description to output file
and checks properties that only hold when every stage works together.

Tests are designed to be fast (low resolution) while still exercising the
full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path

import numpy as np
import pytest

EXAMPLE_SCRIPT = Path(__file__).parent.parent / "examples" / "render_reference_scene.py"


def _load_example_module():
    """Import the example script as a module."""
    module_spec = importlib.util.spec_from_file_location("render_reference_scene", EXAMPLE_SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


class TestLitSphere:
    """A single red sphere lit from behind the camera."""

    def _render(self, size: int = 11) -> np.ndarray:
        from mirrortrace.camera.pinhole import PinholeCamera
        from mirrortrace.core.renderer import render_scene
        from mirrortrace.scene.model import LightInfo, Material, Scene, SphereInfo

        scene = Scene(
            spheres=(
                SphereInfo(
                    center=(0.0, 0.0, 0.0),
                    radius=1.0,
                    material=Material(color=(1.0, 0.0, 0.0)),
                ),
            ),
            lights=(LightInfo(position=(0.0, 0.0, -10.0), intensity=1.0),),
        )
        camera = PinholeCamera(position=(0.0, 0.0, -5.0), fov=60.0)
        return render_scene(scene, camera, size, size)

    def test_center_pixel_is_bright_red(self) -> None:
        """Test the pixel facing the light is nearly full red."""
        from mirrortrace.output.export import to_pixel_values

        pixels = to_pixel_values(self._render())
        r, g, b = pixels[5, 5].tolist()

        assert r >= 250
        assert g == 0
        assert b == 0

    def test_corners_are_background(self) -> None:
        """Test pixels outside the silhouette are exactly black."""
        from mirrortrace.output.export import to_pixel_values

        pixels = to_pixel_values(self._render())

        for y, x in [(0, 0), (0, 10), (10, 0), (10, 10)]:
            assert pixels[y, x].tolist() == [0, 0, 0]

    def test_image_is_symmetric(self) -> None:
        """Test the head-on view is mirror symmetric left to right."""
        image = self._render()

        np.testing.assert_allclose(image, image[:, ::-1], atol=1e-5)


class TestReferenceScene:
    """Tests for the reference demo scene."""

    def test_reference_scene_renders(self) -> None:
        """Test the reference scene produces a lit, finite image."""
        from mirrortrace.core.renderer import render_scene
        from mirrortrace.scene.reference import create_reference_scene

        scene, camera = create_reference_scene()
        image = render_scene(scene, camera, 32, 24)

        assert image.shape == (24, 32, 3)
        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
        # Lit geometry and empty sky are both in view
        assert image.max() > 0.5
        assert np.all(image[0] == 0.0)

    def test_floor_shows_checkerboard(self) -> None:
        """Test the bottom row of the floor alternates in brightness."""
        from mirrortrace.core.renderer import render_scene
        from mirrortrace.scene.reference import create_reference_scene

        scene, camera = create_reference_scene()
        image = render_scene(scene, camera, 64, 48)

        bottom = image[-1, :, 0]
        assert bottom.max() - bottom.min() > 0.1

    def test_example_script_writes_ppm(self, tmp_path) -> None:
        """Test the example renders and writes a PPM file."""
        module = _load_example_module()
        output = tmp_path / "reference.ppm"

        result = module.render_reference_scene(width=16, height=12, output_path=str(output))

        assert result == output
        lines = output.read_text().splitlines()
        assert lines[:3] == ["P3", "16 12", "255"]
        assert len(lines) == 3 + 12

    def test_example_script_loads_scene_file(self, tmp_path) -> None:
        """Test the example renders a scene saved as JSON to PNG."""
        from PIL import Image

        from mirrortrace.scene.model import save_scene_file
        from mirrortrace.scene.reference import create_reference_scene

        module = _load_example_module()
        scene, _ = create_reference_scene()
        scene_path = tmp_path / "scene.json"
        save_scene_file(scene, scene_path)
        output = tmp_path / "reference.png"

        module.render_reference_scene(
            width=8,
            height=6,
            output_path=str(output),
            scene_path=str(scene_path),
            max_depth=1,
            samples_per_axis=1,
        )

        with Image.open(output) as img:
            assert img.size == (8, 6)

    def test_example_script_rejects_unknown_format(self, tmp_path) -> None:
        """Test unsupported output suffixes are rejected before rendering."""
        module = _load_example_module()

        with pytest.raises(ValueError, match="Unsupported output format"):
            module.render_reference_scene(output_path=str(tmp_path / "out.jpg"))
