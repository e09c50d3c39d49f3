#!/usr/bin/env python3
"""Render the reference scene, or a scene loaded from a JSON file.

Usage:
    python examples/render_reference_scene.py [options]

Options:
    --width WIDTH               Image width in pixels (default: 640)
    --height HEIGHT             Image height in pixels (default: 480)
    --output OUTPUT             Output file, .ppm or .png (default: reference.ppm)
    --scene SCENE               JSON scene file (default: built-in reference scene)
    --max-depth DEPTH           Deepest shaded reflection level (default: 5)
    --samples-per-axis N        Anti-aliasing grid side (default: 2)
    --band-height ROWS          Rows rendered per progress update (default: 64)
    --clamp                     Clip channel values to [0, 255] before writing
    --cpu                       Force the CPU backend
    --verbose                   Log per-band progress

Example:
    python examples/render_reference_scene.py --width 320 --height 240 --output demo.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_reference_scene")

OUTPUT_SUFFIXES = (".ppm", ".png")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the reference scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=640, help="Image width in pixels (default: 640)")
    parser.add_argument("--height", type=int, default=480, help="Image height in pixels (default: 480)")
    parser.add_argument(
        "--output",
        type=str,
        default="reference.ppm",
        help="Output file path, .ppm or .png (default: reference.ppm)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in reference scene)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=5,
        help="Deepest shaded reflection level (default: 5)",
    )
    parser.add_argument(
        "--samples-per-axis",
        type=int,
        default=2,
        help="Anti-aliasing grid side (default: 2)",
    )
    parser.add_argument(
        "--band-height",
        type=int,
        default=64,
        help="Rows rendered per progress update (default: 64)",
    )
    parser.add_argument(
        "--clamp",
        action="store_true",
        help="Clip channel values to [0, 255] before writing",
    )
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--verbose", action="store_true", help="Log per-band progress")
    return parser.parse_args()


def render_reference_scene(
    width: int = 640,
    height: int = 480,
    output_path: str = "reference.ppm",
    scene_path: str | None = None,
    max_depth: int = 5,
    samples_per_axis: int = 2,
    band_height: int = 64,
    clamp: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        output_path: Output file path (.ppm or .png).
        scene_path: Optional JSON scene file. The scene keeps the reference
            camera.
        max_depth: Deepest shaded reflection level.
        samples_per_axis: Anti-aliasing grid side.
        band_height: Rows rendered per kernel launch.
        clamp: Clip channel values before writing.

    Returns:
        Path to the saved image file.

    Raises:
        ValueError: If the output suffix is not supported.
    """
    output_file = Path(output_path)
    if output_file.suffix.lower() not in OUTPUT_SUFFIXES:
        raise ValueError(
            f"Unsupported output format {output_file.suffix!r}, expected one of {OUTPUT_SUFFIXES}"
        )

    # Lazy imports to allow Taichi initialization first
    from mirrortrace.camera.pinhole import setup_camera
    from mirrortrace.core.renderer import Renderer
    from mirrortrace.core.tracer import RenderSettings
    from mirrortrace.scene.manager import load_scene
    from mirrortrace.scene.model import load_scene_file
    from mirrortrace.scene.reference import create_reference_scene

    scene, camera = create_reference_scene()
    if scene_path is not None:
        scene = load_scene_file(scene_path)
        logger.info(f"Loaded scene from {scene_path}")

    load_scene(scene)
    setup_camera(camera)

    settings = RenderSettings(max_depth=max_depth, samples_per_axis=samples_per_axis)
    renderer = Renderer(width, height, settings)

    def progress_callback(done: int, total: int) -> None:
        logger.debug(f"Progress: {done}/{total} rows ({100.0 * done / total:.1f}%)")

    renderer.render(band_height=band_height, callback=progress_callback)

    if output_file.suffix.lower() == ".png":
        renderer.save_png(output_file, clamp=clamp)
    else:
        renderer.save_ppm(output_file, clamp=clamp)

    logger.info(f"Saved to: {output_file.absolute()}")
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Taichi must be initialized before importing modules that declare fields.
    # ti.gpu falls back to the CPU when no GPU backend is available.
    ti.init(arch=ti.cpu if args.cpu else ti.gpu)

    try:
        render_reference_scene(
            width=args.width,
            height=args.height,
            output_path=args.output,
            scene_path=args.scene,
            max_depth=args.max_depth,
            samples_per_axis=args.samples_per_axis,
            band_height=args.band_height,
            clamp=args.clamp,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
