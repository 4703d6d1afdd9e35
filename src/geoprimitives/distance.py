#!/usr/bin/env python3
"""
Great-circle distance calculations and the Distance value type.
"""

from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass
from enum import Enum
import logging
import math

from .config import DEFAULT_CONFIG, ValidationConfig
from .coordinate import Coordinate
from .validation import ErrorKind, ValidationResult

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_MILES = 3958.8

KM_TO_MILES = 0.621371
KM_TO_NAUTICAL_MILES = 0.539957
KM_TO_METERS = 1000.0


class DistanceUnit(Enum):
    """Enumeration for supported distance units."""

    KILOMETERS = "km"
    MILES = "mi"
    METERS = "m"
    NAUTICAL_MILES = "nm"

    def __str__(self) -> str:
        return self.value


_KM_FACTORS = {
    DistanceUnit.KILOMETERS: 1.0,
    DistanceUnit.MILES: KM_TO_MILES,
    DistanceUnit.METERS: KM_TO_METERS,
    DistanceUnit.NAUTICAL_MILES: KM_TO_NAUTICAL_MILES,
}


def convert_kilometers(kilometers: float, unit: DistanceUnit) -> float:
    """Convert a distance in kilometers to the given unit."""
    return kilometers * _KM_FACTORS[unit]


def haversine_distance(
    pos1: Coordinate, pos2: Coordinate, radius_km: float = EARTH_RADIUS_KM
) -> float:
    """
    Calculate the great-circle distance between two positions.

    Altitude is ignored; this is a 2-D distance on a sphere.

    Args:
        pos1: First position
        pos2: Second position
        radius_km: Sphere radius in kilometers

    Returns:
        Distance in kilometers
    """
    lat1, lon1 = math.radians(pos1.latitude), math.radians(pos1.longitude)
    lat2, lon2 = math.radians(pos2.latitude), math.radians(pos2.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    # Rounding can push a marginally past 1 for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return radius_km * c


def calculate_bearing(pos1: Coordinate, pos2: Coordinate) -> float:
    """
    Calculate the initial bearing from pos1 to pos2.

    Returns:
        Bearing in degrees in the range [0, 360)
    """
    lat1, lat2 = math.radians(pos1.latitude), math.radians(pos2.latitude)
    dlon = math.radians(pos2.longitude - pos1.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(
        dlon
    )
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360.0) % 360.0


def _clamp_unit(value: float) -> float:
    return max(-1.0, min(1.0, value))


def point_to_segment_distance(
    point: Coordinate,
    seg_start: Coordinate,
    seg_end: Coordinate,
    radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """
    Calculate the distance from a point to a great-circle segment.

    The point is projected onto the great circle through the segment using
    the cross-track/along-track decomposition. When the projection falls
    outside the segment the nearer endpoint is used instead.

    Args:
        point: Point to measure distance from
        seg_start: Start of the segment
        seg_end: End of the segment
        radius_km: Sphere radius in kilometers

    Returns:
        Shortest distance from point to segment in kilometers
    """
    to_start = haversine_distance(seg_start, point, radius_km)
    to_end = haversine_distance(seg_end, point, radius_km)
    nearest_endpoint = min(to_start, to_end)

    segment_length = haversine_distance(seg_start, seg_end, radius_km)
    if segment_length == 0.0 or to_start == 0.0:
        return nearest_endpoint

    angular_to_point = to_start / radius_km
    theta_point = math.radians(calculate_bearing(seg_start, point))
    theta_segment = math.radians(calculate_bearing(seg_start, seg_end))
    relative_bearing = theta_point - theta_segment

    # Projection lies behind the segment start
    if math.cos(relative_bearing) < 0:
        return nearest_endpoint

    cross_track = math.asin(
        _clamp_unit(math.sin(angular_to_point) * math.sin(relative_bearing))
    )
    cos_cross = math.cos(cross_track)
    if cos_cross == 0.0:
        return nearest_endpoint

    along_track = math.acos(_clamp_unit(math.cos(angular_to_point) / cos_cross))
    if along_track * radius_km > segment_length:
        return nearest_endpoint

    return min(abs(cross_track) * radius_km, nearest_endpoint)


@dataclass(frozen=True)
class Distance:
    """
    Great-circle distance between two coordinates.

    The distance is computed once by ``try_create`` and stored in
    kilometers; every other unit is derived from that value.
    """

    start: Coordinate
    end: Coordinate
    kilometers: float

    @classmethod
    def try_create(
        cls,
        start: Optional[Coordinate],
        end: Optional[Coordinate],
        config: Optional[ValidationConfig] = None,
    ) -> Tuple[ValidationResult, Optional["Distance"]]:
        """
        Compute the distance between two coordinates.

        Args:
            start: Starting coordinate
            end: Ending coordinate
            config: Validation policy; supplies the earth radius

        Returns:
            Tuple of (result, distance). Fails only when an endpoint is missing.
        """
        config = config or DEFAULT_CONFIG
        result = ValidationResult()

        if start is None:
            result.add_error(
                ErrorKind.REQUIRED, "start", "Starting coordinate is required."
            )
        if end is None:
            result.add_error(ErrorKind.REQUIRED, "end", "Ending coordinate is required.")
        if not result.is_valid:
            return result, None

        kilometers = haversine_distance(start, end, config.earth_radius_km)  # type: ignore[arg-type]
        return result, cls(start=start, end=end, kilometers=kilometers)  # type: ignore[arg-type]

    @property
    def meters(self) -> float:
        return self.kilometers * KM_TO_METERS

    @property
    def miles(self) -> float:
        return self.kilometers * KM_TO_MILES

    @property
    def nautical_miles(self) -> float:
        return self.kilometers * KM_TO_NAUTICAL_MILES

    def in_unit(self, unit: DistanceUnit) -> float:
        return convert_kilometers(self.kilometers, unit)

    def is_within_radius(self, radius_km: float) -> bool:
        """Return True if the distance is at most radius_km (inclusive)."""
        return self.kilometers <= radius_km

    def to_formatted_string(
        self, unit: DistanceUnit = DistanceUnit.KILOMETERS, decimal_places: int = 2
    ) -> str:
        return f"{self.in_unit(unit):.{decimal_places}f} {unit.value}"

    def get_description(self) -> str:
        return (
            f"Distance from {self.start.to_cardinal_string()} to "
            f"{self.end.to_cardinal_string()}: "
            f"{self.kilometers:.2f} km ({self.miles:.2f} mi)"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "kilometers": self.kilometers,
            "miles": self.miles,
            "meters": self.meters,
            "nautical_miles": self.nautical_miles,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[ValidationConfig] = None
    ) -> Tuple[ValidationResult, Optional["Distance"]]:
        """
        Rebuild a Distance from ``to_dict`` output.

        The stored distance values are ignored and recomputed from the
        endpoints.
        """
        result = ValidationResult()
        endpoints = []
        for key in ("start", "end"):
            if data.get(key) is None:
                endpoints.append(None)
                continue
            coord_result, coord = Coordinate.from_dict(data[key], config)
            for error in coord_result.errors:
                result.add_error(error.kind, f"{key}.{error.field}", error.message)
            endpoints.append(coord)

        if not result.is_valid:
            return result, None
        return cls.try_create(endpoints[0], endpoints[1], config)

    def __str__(self) -> str:
        return self.to_formatted_string()
