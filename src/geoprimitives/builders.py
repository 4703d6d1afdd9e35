"""
Fluent builders for coordinates and routes.

Builders are immutable values: every ``with_*``/``add_*`` call returns a new
builder, so nothing leaks between unrelated constructions. ``build()`` always
funnels into the matching validating ``try_create``.
"""

from typing import Optional, Tuple
from dataclasses import dataclass, replace

from .config import ValidationConfig
from .coordinate import Coordinate, Number
from .route import Route, RouteSegment
from .validation import ValidationError, ValidationResult


@dataclass(frozen=True)
class CoordinateBuilder:
    latitude: Optional[Number] = None
    longitude: Optional[Number] = None
    decimal_places: Optional[int] = None
    altitude: Optional[Number] = None
    accuracy: Optional[Number] = None
    config: Optional[ValidationConfig] = None

    def with_latitude(self, latitude: Number) -> "CoordinateBuilder":
        return replace(self, latitude=latitude)

    def with_longitude(self, longitude: Number) -> "CoordinateBuilder":
        return replace(self, longitude=longitude)

    def with_coordinates(self, latitude: Number, longitude: Number) -> "CoordinateBuilder":
        return replace(self, latitude=latitude, longitude=longitude)

    def with_decimal_places(self, decimal_places: int) -> "CoordinateBuilder":
        return replace(self, decimal_places=decimal_places)

    def with_altitude(self, altitude: Optional[Number]) -> "CoordinateBuilder":
        return replace(self, altitude=altitude)

    def with_accuracy(self, accuracy: Optional[Number]) -> "CoordinateBuilder":
        return replace(self, accuracy=accuracy)

    def with_position(
        self,
        latitude: Number,
        longitude: Number,
        altitude: Optional[Number] = None,
        accuracy: Optional[Number] = None,
    ) -> "CoordinateBuilder":
        return replace(
            self,
            latitude=latitude,
            longitude=longitude,
            altitude=altitude,
            accuracy=accuracy,
        )

    def build(self) -> Tuple[ValidationResult, Optional[Coordinate]]:
        return Coordinate.try_create(
            self.latitude,
            self.longitude,
            decimal_places=self.decimal_places,
            altitude=self.altitude,
            accuracy=self.accuracy,
            config=self.config,
        )


@dataclass(frozen=True)
class RouteBuilder:
    """
    Accumulates segments for a Route.

    Segments built from coordinate pairs that fail validation are not
    dropped: their errors are kept and reported by ``build()``.
    """

    segments: Tuple[RouteSegment, ...] = ()
    name: Optional[str] = None
    pending_errors: Tuple[ValidationError, ...] = ()
    failed_count: int = 0
    config: Optional[ValidationConfig] = None

    def add_segment(self, segment: RouteSegment) -> "RouteBuilder":
        return replace(self, segments=self.segments + (segment,))

    def add_segments(self, *segments: RouteSegment) -> "RouteBuilder":
        return replace(self, segments=self.segments + tuple(segments))

    def add_segment_between(
        self,
        start: Optional[Coordinate],
        end: Optional[Coordinate],
        segment_name: Optional[str] = None,
    ) -> "RouteBuilder":
        result, segment = RouteSegment.try_create(start, end, segment_name, self.config)
        if segment is None:
            position = len(self.segments) + self.failed_count
            errors = tuple(
                error._replace(field=f"segments[{position}].{error.field}")
                for error in result.errors
            )
            return replace(
                self,
                pending_errors=self.pending_errors + errors,
                failed_count=self.failed_count + 1,
            )
        return self.add_segment(segment)

    def with_name(self, name: Optional[str]) -> "RouteBuilder":
        return replace(self, name=name)

    @property
    def segment_count(self) -> int:
        return len(self.segments)

    def build(self) -> Tuple[ValidationResult, Optional[Route]]:
        if self.pending_errors:
            return ValidationResult(list(self.pending_errors)), None
        return Route.try_create(self.segments, self.name, self.config)
