#!/usr/bin/env python
"""
Command-line interface for Polygonizer

Usage:
    python cli.py analyze --input rects.json --output islands.json
    python cli.py query --x 200 --y 250
"""

import os
import sys
import json
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from polygonizer import IslandCatalog, PolygonizerError, load_rectangles, load_sample_rectangles


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def _load_input(path):
    if path:
        return load_rectangles(path)
    logger.info("No input given, using the bundled sample rectangles")
    return load_sample_rectangles()


def cmd_analyze(args):
    """Group rectangles into islands and report area and centroid"""
    setup_logging(args.verbose)

    try:
        rectangles = _load_input(args.input)
        catalog = IslandCatalog()
        records = catalog.analyze(rectangles)
    except (OSError, ValueError, PolygonizerError) as e:
        logger.error(f"Failed to analyze rectangles: {e}")
        return 1

    for record in records:
        logger.info(
            f"  Island {record.id}: {len(record.rectangle_indices)} rectangles, "
            f"area {record.area:.2f}, centroid ({record.centroid.x:.2f}, {record.centroid.y:.2f}), "
            f"{len(record.boundary.holes)} holes"
        )
    for failure in catalog.failures:
        logger.warning(f"  Island {failure.island_id} failed: {failure.reason}")

    if args.output:
        catalog.save(args.output)
        logger.info(f"✓ Saved: {args.output}")

    if args.summary:
        print(json.dumps(catalog.summary(), indent=2))

    return 0 if not catalog.failures else 1


def cmd_query(args):
    """Find the island containing a point and measure it there"""
    setup_logging(args.verbose)

    try:
        catalog = IslandCatalog()
        catalog.analyze(_load_input(args.input))
    except (OSError, ValueError, PolygonizerError) as e:
        logger.error(f"Failed to analyze rectangles: {e}")
        return 1

    measurement = catalog.measure_at_point((args.x, args.y))
    if measurement is None:
        logger.info(f"No island contains ({args.x}, {args.y})")
        print(json.dumps({"point": [args.x, args.y], "island_id": None}, indent=2))
        return 0

    if measurement.distances.on_boundary:
        logger.info(f"({args.x}, {args.y}) lies on the boundary of island {measurement.island_id}")

    print(json.dumps(measurement.model_dump(), indent=2))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Polygonizer CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Analyze the bundled sample layout:
    python cli.py analyze --summary

  Analyze a rectangle file:
    python cli.py analyze --input rects.csv --output islands.json

  Measure the island under a point:
    python cli.py query --x 200 --y 250 --input rects.json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze rectangles into islands")
    analyze_parser.add_argument("--input", "-i", help="Input JSON or CSV file (default: sample layout)")
    analyze_parser.add_argument("--output", "-o", help="Output JSON file")
    analyze_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    analyze_parser.set_defaults(func=cmd_analyze)

    # Query command
    query_parser = subparsers.add_parser("query", help="Measure the island containing a point")
    query_parser.add_argument("--x", type=float, required=True, help="Point x")
    query_parser.add_argument("--y", type=float, required=True, help="Point y")
    query_parser.add_argument("--input", "-i", help="Input JSON or CSV file (default: sample layout)")
    query_parser.set_defaults(func=cmd_query)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
