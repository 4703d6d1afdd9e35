#!/usr/bin/env python3
"""
Build routes and boundaries from GPX documents.
"""

from typing import List, Optional, TextIO, Tuple
import logging

import gpxpy
import gpxpy.gpx

from .boundary import Boundary
from .config import DEFAULT_CONFIG, ValidationConfig
from .coordinate import Coordinate
from .route import Route, RouteSegment
from .validation import ErrorKind, ValidationResult

logger = logging.getLogger(__name__)


def _points_to_coordinates(
    points: list,
    decimal_places: int,
    config: ValidationConfig,
    result: ValidationResult,
) -> List[Coordinate]:
    """Validate GPX points, rounding lat/lon to the requested precision."""
    coordinates = []
    for i, point in enumerate(points):
        point_result, coordinate = Coordinate.try_create(
            round(point.latitude, decimal_places),
            round(point.longitude, decimal_places),
            decimal_places=decimal_places,
            altitude=point.elevation,
            config=config,
        )
        for error in point_result.errors:
            result.add_error(error.kind, f"points[{i}].{error.field}", error.message)
        if coordinate is not None:
            coordinates.append(coordinate)
    return coordinates


def _route_points(gpx_data: gpxpy.gpx.GPX) -> list:
    points = []
    for track in gpx_data.tracks:
        for segment in track.segments:
            points.extend(segment.points)
    for gpx_route in gpx_data.routes:
        points.extend(gpx_route.points)
    return points


def route_from_gpx(
    file_input: TextIO,
    name: Optional[str] = None,
    decimal_places: Optional[int] = None,
    config: Optional[ValidationConfig] = None,
) -> Tuple[ValidationResult, Optional[Route]]:
    """
    Parse a GPX document into a Route.

    All track points (every track and segment) and then all route points are
    concatenated in document order; one RouteSegment is created per
    consecutive pair.

    Args:
        file_input: File-like object containing GPX data
        name: Route name; defaults to the first track or route name in the file
        decimal_places: Precision to round points to; config default if None
        config: Validation policy

    Returns:
        Tuple of (result, route)

    Raises:
        gpxpy.gpx.GPXException: If the GPX document is malformed.
    """
    config = config or DEFAULT_CONFIG
    if decimal_places is None:
        decimal_places = config.default_decimal_places

    gpx_data = gpxpy.parse(file_input)
    points = _route_points(gpx_data)
    logger.debug(f"Parsed {len(points)} points from GPX document")

    if name is None:
        named = [t.name for t in gpx_data.tracks] + [r.name for r in gpx_data.routes]
        name = next((n for n in named if n), None)

    result = ValidationResult()
    coordinates = _points_to_coordinates(points, decimal_places, config, result)
    if not result.is_valid:
        return result, None

    if len(coordinates) < 2:
        result.add_error(
            ErrorKind.EMPTY_SEGMENTS,
            "segments",
            f"GPX document needs at least 2 points to form a route, got {len(coordinates)}.",
        )
        return result, None

    segments = []
    for i in range(len(coordinates) - 1):
        segment_result, segment = RouteSegment.try_create(
            coordinates[i], coordinates[i + 1], config=config
        )
        for error in segment_result.errors:
            result.add_error(error.kind, f"segments[{i}].{error.field}", error.message)
        segments.append(segment)

    if not result.is_valid:
        return result, None

    return Route.try_create(segments, name, config)


def route_from_file(
    filename: str,
    name: Optional[str] = None,
    decimal_places: Optional[int] = None,
    config: Optional[ValidationConfig] = None,
) -> Tuple[ValidationResult, Optional[Route]]:
    """
    Load and parse a GPX file into a Route.

    Raises:
        FileNotFoundError: If file doesn't exist.
        PermissionError: If file can't be read.
        gpxpy.gpx.GPXException: If GPX file is malformed.
    """
    logger.debug(f"Reading GPX file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return route_from_gpx(f, name, decimal_places, config)


def boundary_from_gpx(
    file_input: TextIO,
    decimal_places: Optional[int] = None,
    config: Optional[ValidationConfig] = None,
) -> Tuple[ValidationResult, Optional[Boundary]]:
    """
    Parse a GPX document into a Boundary.

    Waypoints are used as polygon vertices when present; otherwise the
    track and route points are used. A closing point equal to the first one
    is dropped, since the boundary closes itself.

    Raises:
        gpxpy.gpx.GPXException: If the GPX document is malformed.
    """
    config = config or DEFAULT_CONFIG
    if decimal_places is None:
        decimal_places = config.default_decimal_places

    gpx_data = gpxpy.parse(file_input)
    points = list(gpx_data.waypoints) or _route_points(gpx_data)

    result = ValidationResult()
    vertices = _points_to_coordinates(points, decimal_places, config, result)
    if not result.is_valid:
        return result, None

    if len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices = vertices[:-1]

    return Boundary.try_create(vertices, config)


def boundary_from_file(
    filename: str,
    decimal_places: Optional[int] = None,
    config: Optional[ValidationConfig] = None,
) -> Tuple[ValidationResult, Optional[Boundary]]:
    logger.debug(f"Reading GPX boundary file: {filename}")
    with open(filename, "r", encoding="utf-8") as f:
        return boundary_from_gpx(f, decimal_places, config)
