#!/usr/bin/env python3
"""
geoprimitives - validated geospatial value types.

This package provides immutable, validated coordinates, great-circle
distances, polygon boundaries and contiguous multi-segment routes.
"""
import importlib.metadata

__version__ = importlib.metadata.version("geoprimitives")

# Import main classes for public API
from .validation import ErrorKind, ValidationError, ValidationFailedError, ValidationResult
from .config import DEFAULT_CONFIG, ValidationConfig
from .coordinate import Coordinate
from .distance import Distance, DistanceUnit, haversine_distance
from .boundary import Boundary, BoundingBox, compute_area
from .route import Route, RouteSegment
from .builders import CoordinateBuilder, RouteBuilder

__all__ = [
    "ErrorKind",
    "ValidationError",
    "ValidationFailedError",
    "ValidationResult",
    "DEFAULT_CONFIG",
    "ValidationConfig",
    "Coordinate",
    "Distance",
    "DistanceUnit",
    "haversine_distance",
    "Boundary",
    "BoundingBox",
    "compute_area",
    "Route",
    "RouteSegment",
    "CoordinateBuilder",
    "RouteBuilder",
]
