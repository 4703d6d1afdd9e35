"""
Validation result aggregation for the geospatial value types.

Every validating constructor returns a ``(ValidationResult, value-or-None)``
pair. Errors are accumulated, never raised, so a single call reports every
rule the input violated.
"""

from typing import Dict, List, NamedTuple
from dataclasses import dataclass, field
from enum import Enum


class ErrorKind(Enum):
    """Enumeration for validation error kinds."""

    RANGE = "range"
    PRECISION_MISMATCH = "precision_mismatch"
    INSUFFICIENT_VERTICES = "insufficient_vertices"
    EMPTY_SEGMENTS = "empty_segments"
    DISCONTINUITY = "discontinuity"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    REQUIRED = "required"
    INVALID_VERTEX = "invalid_vertex"
    INVALID_SEGMENT = "invalid_segment"
    SELF_INTERSECTING = "self_intersecting"
    ZERO_LENGTH_SEGMENT = "zero_length_segment"

    def __str__(self) -> str:
        return self.value


class ValidationError(NamedTuple):
    """A single field-scoped validation failure."""

    kind: ErrorKind
    field: str
    message: str

    def __str__(self) -> str:
        if not self.field:
            return self.message
        return f"{self.field}: {self.message}"


class ValidationFailedError(ValueError):
    """Raised by ``ValidationResult.raise_if_invalid`` for callers that want exceptions."""

    def __init__(self, result: "ValidationResult"):
        super().__init__(result.to_single_message())
        self.result = result


@dataclass
class ValidationResult:
    """Collects zero or more validation errors for one construction attempt."""

    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, kind: ErrorKind, field_name: str, message: str) -> None:
        self.errors.append(ValidationError(kind, field_name, message))

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Append the errors of another result to this one and return self."""
        if other is not None:
            self.errors.extend(other.errors)
        return self

    def has_error(self, kind: ErrorKind) -> bool:
        return any(error.kind == kind for error in self.errors)

    def errors_for(self, field_name: str) -> List[ValidationError]:
        return [error for error in self.errors if error.field == field_name]

    def to_single_message(self, separator: str = "; ") -> str:
        return separator.join(str(error) for error in self.errors)

    def to_bullet_list(self) -> str:
        return "\n".join(f" - {error}" for error in self.errors)

    def to_dict(self) -> Dict[str, List[str]]:
        """Group error messages by field name."""
        grouped: Dict[str, List[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped

    def raise_if_invalid(self) -> None:
        """
        Raise ValidationFailedError if any error was recorded.

        Raises:
            ValidationFailedError: If the result is not valid
        """
        if not self.is_valid:
            raise ValidationFailedError(self)
