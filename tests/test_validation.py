import pytest

from geoprimitives.validation import (
    ErrorKind,
    ValidationError,
    ValidationFailedError,
    ValidationResult,
)


def make_result():
    result = ValidationResult()
    result.add_error(ErrorKind.RANGE, "latitude", "Latitude must be at most 90°.")
    result.add_error(ErrorKind.PRECISION_MISMATCH, "latitude", "Too many decimal places.")
    result.add_error(ErrorKind.REQUIRED, "longitude", "Longitude is required.")
    return result


def test_empty_result_is_valid():
    result = ValidationResult()
    assert result.is_valid
    assert result.to_single_message() == ""
    assert result.to_dict() == {}
    result.raise_if_invalid()


def test_add_error_invalidates():
    result = make_result()
    assert not result.is_valid
    assert len(result.errors) == 3
    assert result.errors[0] == ValidationError(
        ErrorKind.RANGE, "latitude", "Latitude must be at most 90°."
    )


def test_has_error_and_errors_for():
    result = make_result()
    assert result.has_error(ErrorKind.REQUIRED)
    assert not result.has_error(ErrorKind.DISCONTINUITY)
    assert [e.kind for e in result.errors_for("latitude")] == [
        ErrorKind.RANGE,
        ErrorKind.PRECISION_MISMATCH,
    ]
    assert result.errors_for("altitude") == []


def test_single_message():
    result = make_result()
    assert result.to_single_message() == (
        "latitude: Latitude must be at most 90°.; "
        "latitude: Too many decimal places.; "
        "longitude: Longitude is required."
    )
    assert result.to_single_message(" | ").count(" | ") == 2


def test_bullet_list():
    lines = make_result().to_bullet_list().splitlines()
    assert lines[0] == " - latitude: Latitude must be at most 90°."
    assert len(lines) == 3


def test_to_dict_groups_by_field():
    assert make_result().to_dict() == {
        "latitude": ["Latitude must be at most 90°.", "Too many decimal places."],
        "longitude": ["Longitude is required."],
    }


def test_error_without_field_prints_message_only():
    assert str(ValidationError(ErrorKind.RANGE, "", "Out of range.")) == "Out of range."


def test_merge():
    first = ValidationResult()
    first.add_error(ErrorKind.RANGE, "altitude", "Too high.")
    merged = first.merge(make_result())
    assert merged is first
    assert len(first.errors) == 4
    assert first.merge(None) is first


def test_raise_if_invalid():
    result = make_result()
    with pytest.raises(ValidationFailedError) as excinfo:
        result.raise_if_invalid()
    assert excinfo.value.result is result
    assert "longitude: Longitude is required." in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)


def test_error_kind_str():
    assert str(ErrorKind.DISCONTINUITY) == "discontinuity"
