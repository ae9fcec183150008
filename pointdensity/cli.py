#!/usr/bin/env python3
"""
Point Density Renderer CLI

Renders point clouds into density PNGs.

Commands:
- demo: 100 000 standard-normal samples on an 800x800 grid over [-5, 5]^2
- render: streams a CSV file of points into a scene described by config/render.yml
"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import yaml

from pointdensity.artifacts.png import composite_over, save_png
from pointdensity.common.config import RenderConfigError, load_render_config
from pointdensity.core.color import default_mapping
from pointdensity.core.scene import Scene
from pointdensity.io.loader import CARTESIAN_COLUMNS, GEOGRAPHIC_COLUMNS, aggregate_csv
from pointdensity.utils.constants import (
    DEFAULT_BACKGROUND,
    DEMO_BATCH_SIZE,
    DEMO_BATCHES,
    DEMO_EXTENT,
    DEMO_HEIGHT,
    DEMO_OUTPUT,
    DEMO_SPREAD_RADIUS,
    DEMO_WIDTH,
    LOG_DATE_FORMAT,
    LOG_FORMAT,
)
from pointdensity.utils.error_handling import DensityError, handle_specific_exceptions
from pointdensity.utils.run_logging import RenderLogHandler, generate_run_id

logger = logging.getLogger(__name__)

CLI_ERRORS = (DensityError, RenderConfigError, FileNotFoundError, yaml.YAMLError)


def write_image(
    scene: Scene,
    mapping,
    output: Path,
    spread_radius: int = 0,
    background: Sequence[int] = DEFAULT_BACKGROUND,
) -> Path:
    """Spread, render, composite over ``background`` and write the PNG."""
    scene.spread(spread_radius)
    pixels = scene.render(mapping)
    image = composite_over(pixels, background)
    return save_png(image, output)


def run_demo(args: argparse.Namespace) -> Path:
    rng = np.random.default_rng(args.seed)
    scene = Scene(DEMO_WIDTH, DEMO_HEIGHT, -DEMO_EXTENT, DEMO_EXTENT, -DEMO_EXTENT, DEMO_EXTENT)

    for _ in range(args.batches):
        scene.aggregate(rng.standard_normal((args.batch_size, 2)))

    logger.info(
        f"Aggregated {args.batches * args.batch_size} samples in {args.batches} batches; "
        f"{scene.occupied_bins} occupied bins"
    )
    return write_image(scene, default_mapping(), Path(args.output), args.spread)


def run_render(args: argparse.Namespace) -> Path:
    config = load_render_config(args.config).with_overrides(
        width=args.width,
        height=args.height,
        viewport=args.viewport,
        spread_radius=args.spread,
        mapping_type=args.mapping,
        mapping_color=tuple(args.color) if args.color else None,
        output=args.output,
        chunk_size=args.chunk_size,
    )

    columns = tuple(args.columns) if args.columns else (
        GEOGRAPHIC_COLUMNS if args.geographic else CARTESIAN_COLUMNS
    )

    scene = config.create_scene()
    aggregate_csv(scene, args.points, columns, config.chunk_size, geographic=args.geographic)
    return write_image(
        scene,
        config.create_mapping(),
        config.output,
        config.spread_radius,
        config.background,
    )


@handle_specific_exceptions(CLI_ERRORS, error_context="Render failed")
def run_command(args: argparse.Namespace) -> Path:
    started = time.perf_counter()
    output = args.func(args)
    logger.info(f"Finished '{args.command}' in {time.perf_counter() - started:.2f}s: {output}")
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="point-density",
        description="Render point clouds into density PNGs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reproduce the reference demo image
  point-density demo --output output.png

  # Render a CSV of x,y points with the settings in config/render.yml
  point-density render data/points.csv

  # Render lon/lat (degrees) through Mercator with a custom viewport
  point-density render data/gps.csv --geographic --viewport -0.5 0.5 -0.5 0.5 --spread 2
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--log-dir",
                        help="Also write logs to LOG_DIR/<run-id>/logs/render.log")
    parser.add_argument("--run-id",
                        help="Run identifier for the log directory (default: random)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Render normally distributed sample data")
    demo.add_argument("--output", default=DEMO_OUTPUT,
                      help=f"Output PNG path (default: {DEMO_OUTPUT})")
    demo.add_argument("--seed", type=int, default=None,
                      help="Random seed for reproducible output")
    demo.add_argument("--batches", type=int, default=DEMO_BATCHES,
                      help=f"Number of aggregate calls (default: {DEMO_BATCHES})")
    demo.add_argument("--batch-size", type=int, default=DEMO_BATCH_SIZE,
                      help=f"Samples per batch (default: {DEMO_BATCH_SIZE})")
    demo.add_argument("--spread", type=int, default=DEMO_SPREAD_RADIUS,
                      help=f"Spread radius (default: {DEMO_SPREAD_RADIUS})")
    demo.set_defaults(func=run_demo)

    render = subparsers.add_parser("render", help="Render points from a CSV file")
    render.add_argument("points", help="Path to CSV file with point coordinates")
    render.add_argument("--config", default=None,
                        help="Path to render.yml (default: config/render.yml)")
    render.add_argument("--geographic", action="store_true",
                        help="Columns are lon/lat in degrees; project with Mercator")
    render.add_argument("--columns", nargs=2, metavar=("X", "Y"),
                        help="Coordinate column names (default: x y, or lon lat with --geographic)")
    render.add_argument("--width", type=int, help="Override resolution width")
    render.add_argument("--height", type=int, help="Override resolution height")
    render.add_argument("--viewport", type=float, nargs=4,
                        metavar=("MIN_X", "MAX_X", "MIN_Y", "MAX_Y"),
                        help="Override viewport bounds")
    render.add_argument("--spread", type=int, help="Override spread radius")
    render.add_argument("--mapping", choices=["default", "simple"],
                        help="Override color mapping")
    render.add_argument("--color", type=int, nargs=3, metavar=("R", "G", "B"),
                        help="Foreground color for the simple mapping")
    render.add_argument("--chunk-size", type=int, help="Rows per aggregate call")
    render.add_argument("--output", help="Override output PNG path")
    render.set_defaults(func=run_render)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    try:
        if args.log_dir:
            with RenderLogHandler(args.run_id or generate_run_id(), args.log_dir):
                run_command(args)
        else:
            run_command(args)
    except CLI_ERRORS:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
