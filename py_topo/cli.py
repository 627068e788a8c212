#!/usr/bin/env python3
"""
Generate a terrain and write it out as an SVG topographical map.

Usage:
    py-topo [--seed SEED] [--segments N] [--width W] [--height H] [--output PATH]
"""

import argparse
import sys
from pathlib import Path

import structlog

from .config import ExportSettings, from_settings, settings
from .core.topographic_map import TopographicMap
from .core.vector_path import count_groups
from .core.visibility import VisibilityMode
from .exceptions import TopographyError
from .logging_config import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate an SVG topographical map")
    parser.add_argument("--seed", type=float, help="Terrain seed (random if not specified)")
    parser.add_argument("--segments", type=int, help="Grid cells per side")
    parser.add_argument("--width", type=int, default=settings.viewport_width, help="Canvas width in pixels")
    parser.add_argument("--height", type=int, default=settings.viewport_height, help="Canvas height in pixels")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in VisibilityMode],
        default=settings.visibility_mode,
        help="Triangle visibility test",
    )
    parser.add_argument("--output", default=settings.output_file, help="SVG output path")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, settings.log_format)

    if args.width <= 0 or args.height <= 0:
        logger.error("Canvas size must be positive", width=args.width, height=args.height)
        return 1

    if args.segments is not None and args.segments < 1:
        logger.error("Segments must be positive", segments=args.segments)
        return 1

    try:
        terrain, camera, export = from_settings(settings)
        if args.segments is not None:
            terrain = terrain.model_copy(update={"segments_x": args.segments, "segments_y": args.segments})
        export = ExportSettings(**{**export.model_dump(), "visibility_mode": args.mode})

        topo = TopographicMap.create(
            seed=args.seed,
            terrain=terrain,
            camera=camera,
            export=export,
            aspect=args.width / args.height,
        )
        document = topo.export_vector(args.width, args.height)
    except (TopographyError, ValueError) as e:
        logger.error("Failed to generate map", error=str(e))
        return 1

    output = Path(args.output)
    try:
        output.write_text(document, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write SVG", path=str(output), error=str(e))
        return 1

    logger.info(
        "Map written",
        path=str(output),
        seed=topo.seed,
        outlines=count_groups(document),
        triangles=topo.mesh.triangle_count,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
