#!/usr/bin/env python3
"""
Command-line summary of a GPX route, optionally checked against a boundary.

Requirements:
    pip install gpxpy folium shapely pyproj
"""

from typing import List, Optional
import argparse
import logging
import sys

from gpxpy import gpx

from . import __version__
from . import visualization
from .boundary import Boundary
from .config import DEFAULT_CONFIG, ValidationConfig
from .distance import DistanceUnit, convert_kilometers
from .gpx import boundary_from_file, route_from_file
from .route import Route
from .validation import ValidationResult

logger = logging.getLogger("geoprimitives")

UNIT_CHOICES = [unit.value for unit in DistanceUnit]


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        description="Validate a GPX route and report its distances",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "filename",
        type=str,
        nargs="?",
        help="GPX file containing the route",
    )
    parser.add_argument(
        "--boundary",
        type=str,
        default=None,
        help="GPX file whose waypoints (or points) form a boundary polygon",
    )
    parser.add_argument(
        "--name",
        type=str,
        default=None,
        help="Route name (default: first track or route name in the file)",
    )
    parser.add_argument(
        "--unit",
        choices=UNIT_CHOICES,
        default=DistanceUnit.KILOMETERS.value,
        help="Distance unit for the report (default: km)",
    )
    parser.add_argument(
        "--decimal-places",
        type=int,
        default=DEFAULT_CONFIG.default_decimal_places,
        help="Coordinate precision; GPX points are rounded to it (default: 6)",
    )
    parser.add_argument(
        "--reject-zero-length",
        action="store_true",
        help="Reject routes containing zero-length segments",
    )
    parser.add_argument(
        "--allow-self-intersecting",
        action="store_true",
        help="Accept self-intersecting boundary polygons (results are undefined)",
    )
    parser.add_argument(
        "--area-method",
        choices=["spherical", "geodesic"],
        default=DEFAULT_CONFIG.area_method,
        help="Boundary area method (default: spherical)",
    )
    parser.add_argument(
        "--segment",
        type=int,
        default=None,
        metavar="INDEX",
        help="Only report the segment at this zero-based index",
    )
    parser.add_argument(
        "--map",
        type=str,
        default=None,
        help="Write an interactive HTML map to this file",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def setup_logging(level_name: str) -> None:
    """Setup logging configuration."""
    level = getattr(logging, level_name)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure the root logger so all modules inherit the configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)


def config_from_args(args: argparse.Namespace) -> ValidationConfig:
    return ValidationConfig(
        default_decimal_places=args.decimal_places,
        allow_zero_length_segments=not args.reject_zero_length,
        reject_self_intersecting=not args.allow_self_intersecting,
        area_method=args.area_method,
    )


def report_failure(what: str, result: ValidationResult) -> None:
    print(f"Invalid {what}:")
    print(result.to_bullet_list())


def print_route_report(route: Route, unit: DistanceUnit) -> None:
    """Print the route summary and the distance breakdown per segment."""
    print(route.get_description())
    total = route.total_distance(unit)
    width = len(f"{total:.2f}")

    for index, segment in enumerate(route.segments):
        distance = segment.distance.in_unit(unit)
        cumulative = route.get_cumulative_distance(index, unit)
        label = segment.name or f"Segment {index + 1}"
        print(
            f"{distance:{width}.2f} {unit.value} (cumulative {cumulative:{width}.2f} {unit.value}) {label}"
        )


def print_segment_report(route: Route, index: int, unit: DistanceUnit) -> None:
    segment = route.segments[index]
    print(segment.get_description())
    print(
        f"Cumulative: {route.get_cumulative_distance(index, unit):.2f} {unit.value} "
        f"of {route.total_distance(unit):.2f} {unit.value}"
    )


def print_boundary_report(route: Route, boundary: Boundary, unit: DistanceUnit) -> None:
    """Print containment and edge distance for every route waypoint."""
    print(boundary.get_description())
    for index, waypoint in enumerate(route.get_waypoints()):
        inside = boundary.contains(waypoint)
        edge_km = boundary.distance_to_nearest_edge(waypoint)
        edge = convert_kilometers(edge_km, unit)
        marker = "inside " if inside else "outside"
        print(
            f"[{index}] {waypoint.to_cardinal_string()} {marker} "
            f"({edge:.2f} {unit.value} to nearest edge)"
        )


def main(argv: Optional[List[str]] = None) -> None:
    """
    Parses command-line arguments, loads the GPX route (and boundary),
    prints the distance report, and optionally writes a map.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.filename:
        parser.print_help()
        sys.exit(1)

    setup_logging(args.log_level)
    config = config_from_args(args)
    unit = DistanceUnit(args.unit)

    try:
        result, route = route_from_file(
            args.filename, args.name, args.decimal_places, config
        )
    except FileNotFoundError:
        logger.error(f"GPX file not found: {args.filename}")
        sys.exit(1)
    except PermissionError:
        logger.error(f"Cannot read GPX file (permission denied): {args.filename}")
        sys.exit(1)
    except gpx.GPXException as e:
        logger.error(f"Invalid GPX file: {e}")
        sys.exit(1)

    if route is None:
        report_failure("route", result)
        sys.exit(1)
    logger.info(f"Loaded route with {len(route)} segments")

    boundary = None
    if args.boundary:
        try:
            boundary_result, boundary = boundary_from_file(
                args.boundary, args.decimal_places, config
            )
        except FileNotFoundError:
            logger.error(f"Boundary file not found: {args.boundary}")
            sys.exit(1)
        except gpx.GPXException as e:
            logger.error(f"Invalid boundary GPX file: {e}")
            sys.exit(1)
        if boundary is None:
            report_failure("boundary", boundary_result)
            sys.exit(1)

    if args.segment is not None:
        segment_result, segment = route.try_get_segment(args.segment)
        if segment is None:
            report_failure("segment index", segment_result)
            sys.exit(1)
        print_segment_report(route, args.segment, unit)
    else:
        print_route_report(route, unit)

    if boundary is not None:
        print_boundary_report(route, boundary, unit)

    if args.map:
        try:
            visualization.create_route_map(route, args.map, boundary)
        except OSError as e:
            logger.error(f"Failed to create map: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
