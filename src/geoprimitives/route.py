#!/usr/bin/env python3
"""
Route data model: directed segments composed into a contiguous route.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
from dataclasses import dataclass
import itertools
import logging

from .config import DEFAULT_CONFIG, ValidationConfig
from .coordinate import Coordinate
from .distance import Distance, DistanceUnit, KM_TO_METERS, KM_TO_MILES, convert_kilometers
from .validation import ErrorKind, ValidationResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteSegment:
    """A directed leg between two coordinates with its precomputed distance."""

    start: Coordinate
    end: Coordinate
    distance: Distance
    name: Optional[str] = None

    @classmethod
    def try_create(
        cls,
        start: Optional[Coordinate],
        end: Optional[Coordinate],
        name: Optional[str] = None,
        config: Optional[ValidationConfig] = None,
    ) -> Tuple[ValidationResult, Optional["RouteSegment"]]:
        """
        Build a segment and compute its distance.

        Args:
            start: Starting coordinate
            end: Ending coordinate
            name: Optional segment name
            config: Validation policy; controls whether zero-length segments
                are allowed

        Returns:
            Tuple of (result, segment)
        """
        config = config or DEFAULT_CONFIG

        result, distance = Distance.try_create(start, end, config)
        if distance is None:
            return result, None

        if not config.allow_zero_length_segments and start == end:
            result.add_error(
                ErrorKind.ZERO_LENGTH_SEGMENT,
                "end",
                f"Segment starts and ends at {start.to_cardinal_string()}.",  # type: ignore[union-attr]
            )
            return result, None

        return result, cls(start=start, end=end, distance=distance, name=name)  # type: ignore[arg-type]

    @property
    def is_zero_length(self) -> bool:
        return self.start == self.end

    def get_description(self) -> str:
        prefix = f"{self.name}: " if self.name is not None else "Segment: "
        return (
            f"{prefix}{self.start.to_cardinal_string()} → "
            f"{self.end.to_cardinal_string()} ({self.distance.to_formatted_string()})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "name": self.name,
            "distance": self.distance.to_dict(),
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[ValidationConfig] = None
    ) -> Tuple[ValidationResult, Optional["RouteSegment"]]:
        """Rebuild a segment from ``to_dict`` output; the distance is recomputed."""
        result = ValidationResult()
        endpoints: List[Optional[Coordinate]] = []
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
        return cls.try_create(endpoints[0], endpoints[1], data.get("name"), config)

    def __str__(self) -> str:
        return self.get_description()


@dataclass(frozen=True)
class Route:
    """
    An ordered, contiguous sequence of route segments.

    Every segment ends exactly where the next one starts (full coordinate
    equality). Total and cumulative distances are computed once by
    ``try_create``.
    """

    segments: Tuple[RouteSegment, ...]
    total_distance_km: float
    cumulative_distances_km: Tuple[float, ...]
    name: Optional[str] = None

    @classmethod
    def try_create(
        cls,
        segments: Optional[Iterable[Optional[RouteSegment]]],
        name: Optional[str] = None,
        config: Optional[ValidationConfig] = None,
    ) -> Tuple[ValidationResult, Optional["Route"]]:
        """
        Validate segment contiguity and build a Route.

        Args:
            segments: Ordered route segments, at least one
            name: Optional route name
            config: Validation policy; controls whether zero-length segments
                are allowed

        Returns:
            Tuple of (result, route). Every discontinuity in the sequence is
            reported, not just the first.
        """
        config = config or DEFAULT_CONFIG
        result = ValidationResult()

        if segments is None:
            result.add_error(
                ErrorKind.REQUIRED, "segments", "Segments collection is required."
            )
            return result, None

        segment_list = list(segments)

        if not segment_list:
            result.add_error(
                ErrorKind.EMPTY_SEGMENTS, "segments", "Route must have at least one segment."
            )
            return result, None

        for i, segment in enumerate(segment_list):
            if not isinstance(segment, RouteSegment):
                result.add_error(
                    ErrorKind.INVALID_SEGMENT,
                    f"segments[{i}]",
                    "All segments must be valid route segments.",
                )
            elif not config.allow_zero_length_segments and segment.is_zero_length:
                result.add_error(
                    ErrorKind.ZERO_LENGTH_SEGMENT,
                    f"segments[{i}]",
                    f"Segment {i + 1} starts and ends at {segment.start.to_cardinal_string()}.",
                )

        for i in range(len(segment_list) - 1):
            current = segment_list[i]
            following = segment_list[i + 1]
            if not isinstance(current, RouteSegment) or not isinstance(
                following, RouteSegment
            ):
                continue
            if current.end != following.start:
                result.add_error(
                    ErrorKind.DISCONTINUITY,
                    f"segments[{i + 1}]",
                    f"Segment {i + 1} ends at {current.end.to_cardinal_string()} "
                    f"but segment {i + 2} starts at {following.start.to_cardinal_string()}. "
                    f"Segments must be contiguous.",
                )

        if not result.is_valid:
            logger.debug(f"Rejected route: {result.to_single_message()}")
            return result, None

        frozen_segments: Tuple[RouteSegment, ...] = tuple(segment_list)  # type: ignore[arg-type]
        cumulative = tuple(
            itertools.accumulate(s.distance.kilometers for s in frozen_segments)
        )
        route = cls(
            segments=frozen_segments,
            total_distance_km=cumulative[-1],
            cumulative_distances_km=cumulative,
            name=name,
        )
        logger.debug(
            f"Created route with {len(frozen_segments)} segments, "
            f"total distance {route.total_distance_km:.3f} km"
        )
        return result, route

    @property
    def starting_point(self) -> Coordinate:
        return self.segments[0].start

    @property
    def ending_point(self) -> Coordinate:
        return self.segments[-1].end

    @property
    def total_distance_miles(self) -> float:
        return self.total_distance_km * KM_TO_MILES

    @property
    def total_distance_meters(self) -> float:
        return self.total_distance_km * KM_TO_METERS

    def total_distance(self, unit: DistanceUnit = DistanceUnit.KILOMETERS) -> float:
        return convert_kilometers(self.total_distance_km, unit)

    def get_waypoints(self) -> Tuple[Coordinate, ...]:
        """
        Return the route's waypoints in order.

        The first segment's start followed by every segment's end; shared
        vertices between segments appear once.
        """
        return (self.segments[0].start,) + tuple(s.end for s in self.segments)

    def _index_in_range(self, segment_index: int) -> bool:
        return 0 <= segment_index < len(self.segments)

    def try_get_segment(
        self, segment_index: int
    ) -> Tuple[ValidationResult, Optional[RouteSegment]]:
        """Look up a segment, reporting a bad index as a validation error."""
        result = ValidationResult()
        if not self._index_in_range(segment_index):
            result.add_error(
                ErrorKind.INDEX_OUT_OF_RANGE,
                "segment_index",
                f"Segment index {segment_index} is out of range; "
                f"route has {len(self.segments)} segments.",
            )
            return result, None
        return result, self.segments[segment_index]

    def get_segment_distance(self, segment_index: int) -> Optional[Distance]:
        """Distance of one segment, or None if the index is out of range."""
        if not self._index_in_range(segment_index):
            return None
        return self.segments[segment_index].distance

    def get_cumulative_distance(
        self, segment_index: int, unit: DistanceUnit = DistanceUnit.KILOMETERS
    ) -> Optional[float]:
        """
        Running distance through segments [0..segment_index], inclusive.

        Returns:
            The cumulative distance in the given unit, or None if the index is
            out of range
        """
        if not self._index_in_range(segment_index):
            return None
        return convert_kilometers(self.cumulative_distances_km[segment_index], unit)

    def get_description(self) -> str:
        prefix = f"{self.name}: " if self.name is not None else "Route: "
        count = len(self.segments)
        return (
            f"{prefix}{count} segment{'' if count == 1 else 's'}, "
            f"Total distance: {self.total_distance_km:.2f} km ({self.total_distance_miles:.2f} mi)\n"
            f"From: {self.starting_point.to_cardinal_string()}\n"
            f"To: {self.ending_point.to_cardinal_string()}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "segments": [s.to_dict() for s in self.segments],
            "total_distance_km": self.total_distance_km,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[ValidationConfig] = None
    ) -> Tuple[ValidationResult, Optional["Route"]]:
        """Rebuild a Route from ``to_dict`` output; distances are recomputed."""
        raw_segments = data.get("segments")
        if raw_segments is None:
            return cls.try_create(None, data.get("name"), config)

        result = ValidationResult()
        segments = []
        for i, raw in enumerate(raw_segments):
            segment_result, segment = RouteSegment.from_dict(raw, config)
            for error in segment_result.errors:
                result.add_error(error.kind, f"segments[{i}].{error.field}", error.message)
            segments.append(segment)

        if not result.is_valid:
            return result, None
        return cls.try_create(segments, data.get("name"), config)

    def __len__(self) -> int:
        """Return number of segments in route."""
        return len(self.segments)

    def __iter__(self) -> Iterator[RouteSegment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return self.get_description()
