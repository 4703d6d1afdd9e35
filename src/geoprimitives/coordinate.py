#!/usr/bin/env python3
"""
Validated geographic coordinate value type.
"""

from typing import Any, Dict, Optional, Tuple, Union
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
import logging

from .config import DEFAULT_CONFIG, ValidationConfig
from .validation import ErrorKind, ValidationResult

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal, str]

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


def _to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a numeric input to Decimal, preserving its written precision.

    Floats go through their shortest repr so that 40.7128 counts as four
    fractional digits rather than the binary expansion.

    Returns:
        The Decimal value, or None if the input is not a finite number
    """
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, float):
            number = Decimal(repr(value))
        else:
            number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _fractional_digits(value: Decimal) -> int:
    exponent = value.as_tuple().exponent
    return max(0, -int(exponent))


def _check_degrees(
    result: ValidationResult,
    value: Any,
    field_name: str,
    label: str,
    minimum: float,
    maximum: float,
    decimal_places: Optional[int],
) -> Optional[float]:
    """Validate one angular component and return it as a float when usable."""
    if value is None:
        result.add_error(ErrorKind.REQUIRED, field_name, f"{label} is required.")
        return None

    number = _to_decimal(value)
    if number is None:
        result.add_error(
            ErrorKind.RANGE, field_name, f"{label} must be a finite number."
        )
        return None

    if number < Decimal(str(minimum)):
        result.add_error(
            ErrorKind.RANGE, field_name, f"{label} must be at least {minimum:g}°."
        )
    elif number > Decimal(str(maximum)):
        result.add_error(
            ErrorKind.RANGE, field_name, f"{label} must be at most {maximum:g}°."
        )

    # decimal_places is None when it was itself invalid; skip per-value checks
    if decimal_places is not None and _fractional_digits(number) > decimal_places:
        result.add_error(
            ErrorKind.PRECISION_MISMATCH,
            field_name,
            f"{label} cannot have more than {decimal_places} decimal places.",
        )

    return float(number)


def _check_optional_meters(
    result: ValidationResult,
    value: Any,
    field_name: str,
    label: str,
    minimum: float,
    maximum: float,
    minimum_reason: str,
    maximum_reason: str,
) -> Optional[float]:
    if value is None:
        return None

    number = _to_decimal(value)
    if number is None:
        result.add_error(
            ErrorKind.RANGE, field_name, f"{label} must be a finite number."
        )
        return None

    meters = float(number)
    if meters < minimum:
        result.add_error(ErrorKind.RANGE, field_name, minimum_reason)
    if meters > maximum:
        result.add_error(ErrorKind.RANGE, field_name, maximum_reason)
    return meters


@dataclass(frozen=True)
class Coordinate:
    """
    A validated geographic coordinate.

    Instances should only be obtained from ``Coordinate.try_create`` (or
    ``from_dict``), which guarantees the latitude/longitude ranges, the
    decimal precision and the altitude/accuracy bounds. ``decimal_places``
    only drives formatting and does not take part in equality.
    """

    latitude: float
    longitude: float
    altitude: Optional[float] = None
    accuracy: Optional[float] = None
    decimal_places: int = field(default=6, compare=False)

    @classmethod
    def try_create(
        cls,
        latitude: Optional[Number],
        longitude: Optional[Number],
        decimal_places: Optional[int] = None,
        altitude: Optional[Number] = None,
        accuracy: Optional[Number] = None,
        config: Optional[ValidationConfig] = None,
    ) -> Tuple[ValidationResult, Optional["Coordinate"]]:
        """
        Validate the inputs and build a Coordinate.

        Args:
            latitude: Latitude in decimal degrees (-90 to 90)
            longitude: Longitude in decimal degrees (-180 to 180)
            decimal_places: Maximum fractional digits allowed (0-8); defaults
                to the config's default_decimal_places
            altitude: Optional altitude in meters above sea level
            accuracy: Optional accuracy radius in meters
            config: Validation policy; DEFAULT_CONFIG when omitted

        Returns:
            Tuple of (result, coordinate). The coordinate is None whenever the
            result holds any error; every violated rule is reported.
        """
        config = config or DEFAULT_CONFIG
        result = ValidationResult()

        if decimal_places is None:
            decimal_places = config.default_decimal_places

        checked_places: Optional[int] = decimal_places
        if (
            isinstance(decimal_places, bool)
            or not isinstance(decimal_places, int)
            or not 0 <= decimal_places <= config.max_decimal_places
        ):
            result.add_error(
                ErrorKind.PRECISION_MISMATCH,
                "decimal_places",
                f"Decimal places must be between 0 and {config.max_decimal_places}.",
            )
            checked_places = None

        lat = _check_degrees(
            result,
            latitude,
            "latitude",
            "Latitude",
            MIN_LATITUDE,
            MAX_LATITUDE,
            checked_places,
        )
        lon = _check_degrees(
            result,
            longitude,
            "longitude",
            "Longitude",
            MIN_LONGITUDE,
            MAX_LONGITUDE,
            checked_places,
        )
        alt = _check_optional_meters(
            result,
            altitude,
            "altitude",
            "Altitude",
            config.min_altitude_m,
            config.max_altitude_m,
            f"Altitude cannot be less than {config.min_altitude_m:g} meters.",
            f"Altitude cannot exceed {config.max_altitude_m:g} meters.",
        )
        acc = _check_optional_meters(
            result,
            accuracy,
            "accuracy",
            "Accuracy",
            0.0,
            config.max_accuracy_m,
            "Accuracy cannot be negative.",
            f"Accuracy cannot exceed {config.max_accuracy_m:g} meters.",
        )

        if not result.is_valid:
            logger.debug(
                f"Rejected coordinate ({latitude}, {longitude}): {result.to_single_message()}"
            )
            return result, None

        return result, cls(
            latitude=lat,  # type: ignore[arg-type]
            longitude=lon,  # type: ignore[arg-type]
            altitude=alt,
            accuracy=acc,
            decimal_places=decimal_places,
        )

    def hemisphere(self) -> Tuple[str, str]:
        """Return the (north/south, east/west) hemisphere names."""
        return (
            "North" if self.latitude >= 0 else "South",
            "East" if self.longitude >= 0 else "West",
        )

    def to_cardinal_string(self) -> str:
        """Format as e.g. "40.712800° N, 74.006000° W" (altitude appended if set)."""
        places = self.decimal_places
        lat_dir = "N" if self.latitude >= 0 else "S"
        lon_dir = "E" if self.longitude >= 0 else "W"
        parts = [
            f"{abs(self.latitude):.{places}f}° {lat_dir}",
            f"{abs(self.longitude):.{places}f}° {lon_dir}",
        ]
        if self.altitude is not None:
            parts.append(f"{self.altitude:.1f}m")
        return ", ".join(parts)

    def to_decimal_degrees_string(self) -> str:
        return f"{self.latitude}, {self.longitude}"

    def to_google_maps_format(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle distance to another coordinate in kilometers."""
        # Import here to avoid circular imports
        from .distance import haversine_distance

        return haversine_distance(self, other)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude,
            "accuracy": self.accuracy,
            "decimal_places": self.decimal_places,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], config: Optional[ValidationConfig] = None
    ) -> Tuple[ValidationResult, Optional["Coordinate"]]:
        """Rebuild a Coordinate from ``to_dict`` output, re-running validation."""
        return cls.try_create(
            data.get("latitude"),
            data.get("longitude"),
            decimal_places=data.get("decimal_places"),
            altitude=data.get("altitude"),
            accuracy=data.get("accuracy"),
            config=config,
        )

    def __str__(self) -> str:
        text = self.to_cardinal_string()
        if self.accuracy is not None:
            text += f" (±{self.accuracy:.0f}m)"
        return text

