#!/usr/bin/env python3
"""
Polygon boundaries: area, perimeter, centroid, bounding box and
point-in-polygon queries over validated coordinates.
"""

from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple
from dataclasses import dataclass, field
import logging
import math

import pyproj
from shapely.geometry import LinearRing, Polygon

from .config import DEFAULT_CONFIG, ValidationConfig
from .coordinate import Coordinate
from .distance import (
    EARTH_RADIUS_KM,
    KM_TO_MILES,
    haversine_distance,
    point_to_segment_distance,
)
from .validation import ErrorKind, ValidationResult

logger = logging.getLogger(__name__)

KM2_TO_SQUARE_MILES = 0.386102
KM2_TO_SQUARE_METERS = 1_000_000.0

AREA_METHODS = ("spherical", "geodesic")

# Tolerance (in squared degrees) for treating a point as lying on an edge
_ON_EDGE_EPSILON = 1e-12

_GEOD = pyproj.Geod(ellps="WGS84")


class BoundingBox(NamedTuple):
    """Axis-aligned latitude/longitude rectangle enclosing a boundary."""

    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, point: Coordinate) -> bool:
        """Inclusive containment test against the rectangle."""
        return (
            self.min_latitude <= point.latitude <= self.max_latitude
            and self.min_longitude <= point.longitude <= self.max_longitude
        )


def _spherical_area(vertices: Sequence[Coordinate], radius_km: float) -> float:
    total = 0.0
    n = len(vertices)
    for i in range(n):
        v1 = vertices[i]
        v2 = vertices[(i + 1) % n]
        lat1, lon1 = math.radians(v1.latitude), math.radians(v1.longitude)
        lat2, lon2 = math.radians(v2.latitude), math.radians(v2.longitude)
        total += (lon2 - lon1) * (2 + math.sin(lat1) + math.sin(lat2))
    return abs(total * radius_km * radius_km / 2.0)


def _geodesic_area(vertices: Sequence[Coordinate]) -> float:
    lons = [v.longitude for v in vertices]
    lats = [v.latitude for v in vertices]
    area_m2, _ = _GEOD.polygon_area_perimeter(lons, lats)
    return abs(area_m2) / KM2_TO_SQUARE_METERS


def compute_area(
    vertices: Sequence[Coordinate],
    method: str = "spherical",
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """
    Compute the area enclosed by a polygon of geographic vertices.

    The "spherical" method sums (λ2 - λ1)(2 + sin φ1 + sin φ2) over the
    edges on a sphere of the given radius. The "geodesic" method delegates
    to pyproj on the WGS84 ellipsoid and ignores radius_km. Both report a
    non-negative magnitude, independent of vertex winding.

    Args:
        vertices: Polygon vertices; the closing edge is implicit
        method: "spherical" or "geodesic"
        radius_km: Sphere radius for the spherical method

    Returns:
        Area in square kilometers

    Raises:
        ValueError: If method is not a supported area method
    """
    if method not in AREA_METHODS:
        raise ValueError(
            f"Unknown area method {method!r}; expected one of {', '.join(AREA_METHODS)}"
        )
    if len(vertices) < 3:
        return 0.0
    if method == "geodesic":
        return _geodesic_area(vertices)
    return _spherical_area(vertices, radius_km)


def compute_perimeter(
    vertices: Sequence[Coordinate], radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Sum of great-circle edge lengths in kilometers, closing edge included."""
    n = len(vertices)
    return sum(
        haversine_distance(vertices[i], vertices[(i + 1) % n], radius_km)
        for i in range(n)
    )


def compute_centroid(vertices: Sequence[Coordinate]) -> Coordinate:
    """
    Arithmetic mean of vertex latitudes and longitudes.

    This is the simple vertex centroid, not the area-weighted one.
    """
    avg_lat = round(sum(v.latitude for v in vertices) / len(vertices), 8)
    avg_lon = round(sum(v.longitude for v in vertices) / len(vertices), 8)
    result, centroid = Coordinate.try_create(avg_lat, avg_lon, decimal_places=8)
    # Means of valid coordinates are always in range
    result.raise_if_invalid()
    return centroid  # type: ignore[return-value]


def compute_bounding_box(vertices: Sequence[Coordinate]) -> BoundingBox:
    latitudes = [v.latitude for v in vertices]
    longitudes = [v.longitude for v in vertices]
    return BoundingBox(
        min_latitude=min(latitudes),
        max_latitude=max(latitudes),
        min_longitude=min(longitudes),
        max_longitude=max(longitudes),
    )


def is_simple_ring(vertices: Sequence[Coordinate]) -> bool:
    """Check that the closed vertex ring does not touch or cross itself."""
    ring = LinearRing([(v.longitude, v.latitude) for v in vertices])
    return ring.is_simple


def _on_edge(
    lat: float, lon: float, a: Coordinate, b: Coordinate
) -> bool:
    cross = (b.longitude - a.longitude) * (lat - a.latitude) - (
        b.latitude - a.latitude
    ) * (lon - a.longitude)
    if abs(cross) > _ON_EDGE_EPSILON:
        return False
    return (
        min(a.latitude, b.latitude) <= lat <= max(a.latitude, b.latitude)
        and min(a.longitude, b.longitude) <= lon <= max(a.longitude, b.longitude)
    )


@dataclass(frozen=True)
class Boundary:
    """
    A polygonal geographic boundary.

    The polygon is closed implicitly from the last vertex back to the first.
    Area, perimeter, centroid and bounding box are computed once by
    ``try_create``; queries only read them.
    """

    vertices: Tuple[Coordinate, ...]
    area_km2: float
    perimeter_km: float
    centroid: Coordinate
    bounding_box: BoundingBox
    earth_radius_km: float = field(default=EARTH_RADIUS_KM, repr=False)

    @classmethod
    def try_create(
        cls,
        vertices: Optional[Iterable[Optional[Coordinate]]],
        config: Optional[ValidationConfig] = None,
    ) -> Tuple[ValidationResult, Optional["Boundary"]]:
        """
        Validate a vertex sequence and build a Boundary.

        Args:
            vertices: Ordered polygon vertices, at least three
            config: Validation policy (self-intersection rejection, area method,
                earth radius)

        Returns:
            Tuple of (result, boundary). The boundary is None on any error.
        """
        config = config or DEFAULT_CONFIG
        result = ValidationResult()

        if vertices is None:
            result.add_error(
                ErrorKind.REQUIRED, "vertices", "Vertices collection is required."
            )
            return result, None

        vertex_list = list(vertices)

        for i, vertex in enumerate(vertex_list):
            if not isinstance(vertex, Coordinate):
                result.add_error(
                    ErrorKind.INVALID_VERTEX,
                    f"vertices[{i}]",
                    "All vertices must be valid coordinates.",
                )

        if len(vertex_list) < 3:
            result.add_error(
                ErrorKind.INSUFFICIENT_VERTICES,
                "vertices",
                f"Boundary must have at least 3 vertices to form a polygon, got {len(vertex_list)}.",
            )

        if not result.is_valid:
            logger.debug(f"Rejected boundary: {result.to_single_message()}")
            return result, None

        if config.reject_self_intersecting and not is_simple_ring(vertex_list):  # type: ignore[arg-type]
            result.add_error(
                ErrorKind.SELF_INTERSECTING,
                "vertices",
                "Boundary edges must not intersect each other.",
            )
            logger.debug("Rejected boundary: polygon is not simple")
            return result, None

        frozen_vertices: Tuple[Coordinate, ...] = tuple(vertex_list)  # type: ignore[arg-type]
        radius = config.earth_radius_km

        boundary = cls(
            vertices=frozen_vertices,
            area_km2=compute_area(frozen_vertices, config.area_method, radius),
            perimeter_km=compute_perimeter(frozen_vertices, radius),
            centroid=compute_centroid(frozen_vertices),
            bounding_box=compute_bounding_box(frozen_vertices),
            earth_radius_km=radius,
        )
        logger.debug(
            f"Created boundary with {len(frozen_vertices)} vertices: "
            f"area={boundary.area_km2:.3f}km², perimeter={boundary.perimeter_km:.3f}km"
        )
        return result, boundary

    @property
    def area_square_miles(self) -> float:
        return self.area_km2 * KM2_TO_SQUARE_MILES

    @property
    def area_square_meters(self) -> float:
        return self.area_km2 * KM2_TO_SQUARE_METERS

    @property
    def perimeter_miles(self) -> float:
        return self.perimeter_km * KM_TO_MILES

    def get_bounding_box(self) -> BoundingBox:
        return self.bounding_box

    def edges(self) -> List[Tuple[Coordinate, Coordinate]]:
        """Return (start, end) pairs for every edge, closing edge last."""
        n = len(self.vertices)
        return [(self.vertices[i], self.vertices[(i + 1) % n]) for i in range(n)]

    def contains(self, point: Coordinate) -> bool:
        """
        Test whether a point lies strictly inside the boundary.

        Uses ray casting in the latitude/longitude plane. Points exactly on
        an edge or vertex are treated as outside.

        Args:
            point: The coordinate to test

        Returns:
            True if the point is inside the polygon, False otherwise
        """
        test_lat = point.latitude
        test_lon = point.longitude

        if not self.bounding_box.contains(point):
            return False

        for a, b in self.edges():
            if _on_edge(test_lat, test_lon, a, b):
                return False

        inside = False
        n = len(self.vertices)
        j = n - 1
        for i in range(n):
            vi = self.vertices[i]
            vj = self.vertices[j]
            if (vi.longitude > test_lon) != (vj.longitude > test_lon):
                crossing_lat = (vj.latitude - vi.latitude) * (test_lon - vi.longitude) / (
                    vj.longitude - vi.longitude
                ) + vi.latitude
                if test_lat < crossing_lat:
                    inside = not inside
            j = i

        return inside

    def distance_to_nearest_edge(self, point: Coordinate) -> float:
        """
        Distance from a point to the closest boundary edge in kilometers.

        Measured against every edge segment (not just the vertices). Points
        inside the boundary get their distance to the edge too, not zero.
        """
        return min(
            point_to_segment_distance(point, a, b, self.earth_radius_km)
            for a, b in self.edges()
        )

    def to_polygon(self) -> Polygon:
        """Return a shapely Polygon in (longitude, latitude) order."""
        return Polygon([(v.longitude, v.latitude) for v in self.vertices])

    def get_description(self) -> str:
        return (
            f"Polygon with {len(self.vertices)} vertices: "
            f"Area {self.area_km2:.2f} km² ({self.area_square_miles:.2f} mi²), "
            f"Perimeter {self.perimeter_km:.2f} km ({self.perimeter_miles:.2f} mi)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": [v.to_dict() for v in self.vertices],
            "area_km2": self.area_km2,
            "perimeter_km": self.perimeter_km,
            "centroid": self.centroid.to_dict(),
            "bounding_box": self.bounding_box._asdict(),
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[ValidationConfig] = None
    ) -> Tuple[ValidationResult, Optional["Boundary"]]:
        """Rebuild a Boundary from its vertices; derived values are recomputed."""
        raw_vertices = data.get("vertices")
        if raw_vertices is None:
            return cls.try_create(None, config)

        result = ValidationResult()
        vertices = []
        for i, raw in enumerate(raw_vertices):
            vertex_result, vertex = Coordinate.from_dict(raw, config)
            for error in vertex_result.errors:
                result.add_error(error.kind, f"vertices[{i}].{error.field}", error.message)
            vertices.append(vertex)

        if not result.is_valid:
            return result, None
        return cls.try_create(vertices, config)

    def __str__(self) -> str:
        return self.get_description()
