"""
Command-line interface for nearest-place.

Provides commands for resolving coordinates against a gazetteer and for
inspecting the search geometry around a point.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import NearestPlaceError
from .geometry import DEFAULT_HALF_WIDTH, bounding_box, scale_factor
from .resolver import ResolverConfig, open_resolver


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nearest-place",
        description="Resolve coordinates to the nearest gazetteer feature",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Lookup command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Find the feature nearest to a coordinate",
    )
    lookup_parser.add_argument("latitude", type=float, help="Latitude in degrees")
    lookup_parser.add_argument("longitude", type=float, help="Longitude in degrees")
    lookup_parser.add_argument(
        "--db",
        type=Path,
        required=True,
        help="Path to the DuckDB gazetteer",
    )
    lookup_parser.add_argument(
        "--half-width",
        type=float,
        default=DEFAULT_HALF_WIDTH,
        help=f"Search box half-width in degrees (default: {DEFAULT_HALF_WIDTH})",
    )
    lookup_parser.add_argument(
        "--permissive",
        action="store_true",
        help="Do not reject coordinates outside the WGS84 range",
    )
    lookup_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )

    # Scale command
    scale_parser = subparsers.add_parser(
        "scale",
        help="Show the distance scale factor and search box for a coordinate",
    )
    scale_parser.add_argument("latitude", type=float, help="Latitude in degrees")
    scale_parser.add_argument(
        "longitude",
        type=float,
        nargs="?",
        default=0.0,
        help="Longitude in degrees (default: 0)",
    )
    scale_parser.add_argument(
        "--half-width",
        type=float,
        default=DEFAULT_HALF_WIDTH,
        help=f"Search box half-width in degrees (default: {DEFAULT_HALF_WIDTH})",
    )

    return parser


def cmd_lookup(args: argparse.Namespace) -> int:
    """Handle the lookup command."""
    try:
        config = ResolverConfig(
            half_width=args.half_width,
            validate_range=not args.permissive,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        with open_resolver(args.db, config) as resolver:
            location = resolver.resolve(args.latitude, args.longitude)
    except NearestPlaceError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(location.to_dict(), ensure_ascii=False))
    else:
        print(f"{location.name}, {location.admin_name}, {location.country_name} "
              f"({location.country_code})")
        print(f"  id: {location.id}")
        print(f"  coordinates: {location.latitude}, {location.longitude}")

    return 0


def cmd_scale(args: argparse.Namespace) -> int:
    """Handle the scale command."""
    box = bounding_box(args.latitude, args.longitude, args.half_width)

    print(f"Search geometry for ({args.latitude}, {args.longitude}):")
    print(f"  Scale factor: {scale_factor(args.latitude):.6f}")
    print(f"  Latitude range: [{box.min_lat}, {box.max_lat}]")
    print(f"  Longitude range: [{box.min_lon}, {box.max_lon}]")

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "lookup":
        return cmd_lookup(args)
    elif args.command == "scale":
        return cmd_scale(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
