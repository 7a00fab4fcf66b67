#!/usr/bin/env python3
"""Render the four-sphere demo scene.

This script renders the stock scene (a red diffuse sphere on a large ground
sphere, flanked by a silver and a gold metal sphere) and saves it as a PNG.

Usage:
    python -m examples.render_default_scene [options]

Options:
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: width / (16/9))
    --samples SAMPLES   Number of samples per pixel (default: 100)
    --max-depth DEPTH   Maximum number of bounces (default: 50)
    --seed SEED         Random seed (default: 0)
    --scene NAME        "default" or "two-spheres" (default: default)
    --output OUTPUT     Output file path (default: default_scene.png)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_default_scene --width 400 --samples 50
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

from pixeltrace.core.settings import (
    ASPECT_RATIO,
    DEFAULT_MAX_DEPTH,
    DEFAULT_SAMPLES_PER_PIXEL,
    DEFAULT_WIDTH,
)

SCENES = ("default", "two-spheres")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the four-sphere demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Image width in pixels (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=None,
        help="Image height in pixels (default: width / (16/9))",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=DEFAULT_SAMPLES_PER_PIXEL,
        help=f"Number of samples per pixel (default: {DEFAULT_SAMPLES_PER_PIXEL})",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Maximum number of bounces (default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--scene",
        choices=SCENES,
        default="default",
        help="Scene to render (default: default)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="default_scene.png",
        help="Output file path (default: default_scene.png)",
    )
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def render_scene(
    width: int = DEFAULT_WIDTH,
    height: int | None = None,
    num_samples: int = DEFAULT_SAMPLES_PER_PIXEL,
    max_depth: int = DEFAULT_MAX_DEPTH,
    seed: int = 0,
    scene_name: str = "default",
    output_path: str = "default_scene.png",
    quiet: bool = False,
) -> Path:
    """Render a stock scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels; derived from the 16:9 aspect ratio
            when omitted.
        num_samples: Number of samples per pixel.
        max_depth: Maximum number of bounces.
        seed: Random seed.
        scene_name: One of SCENES.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from pixeltrace.camera.pinhole import Camera, CameraConfig
    from pixeltrace.core.integrator import render_image
    from pixeltrace.core.settings import RenderSettings
    from pixeltrace.preview.export import save_png
    from pixeltrace.scene.default import create_default_scene, create_two_sphere_scene

    if height is None:
        settings = RenderSettings.for_aspect_ratio(
            width,
            ASPECT_RATIO,
            samples_per_pixel=num_samples,
            max_depth=max_depth,
            seed=seed,
        )
    else:
        settings = RenderSettings(width, height, num_samples, max_depth, seed)

    if not quiet:
        print(f"Creating {scene_name} scene ({settings.width}x{settings.height})...")

    scene = create_default_scene() if scene_name == "default" else create_two_sphere_scene()
    camera = Camera(CameraConfig.for_resolution(settings.width, settings.height))

    if not quiet:
        print(f"Rendering {settings.samples_per_pixel} samples per pixel...")

    start_time = time.time()
    frame = render_image(scene, camera, settings)
    output_file = save_png(frame, settings.width, settings.height, output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    # Taichi falls back to CPU when no GPU backend is available
    ti.init(arch=ti.cpu if args.cpu else ti.gpu)

    try:
        render_scene(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            max_depth=args.max_depth,
            seed=args.seed,
            scene_name=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
