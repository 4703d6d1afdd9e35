from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationConfig:
    """Validation policy shared by the geospatial constructors."""

    default_decimal_places: int = 6
    max_decimal_places: int = 8
    min_altitude_m: float = -500.0
    max_altitude_m: float = 10000.0
    max_accuracy_m: float = 1000000.0
    earth_radius_km: float = 6371.0
    allow_zero_length_segments: bool = True
    reject_self_intersecting: bool = True
    area_method: str = "spherical"


DEFAULT_CONFIG = ValidationConfig()
