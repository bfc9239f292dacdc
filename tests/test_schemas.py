from datetime import date, datetime

import pytest

from relay_monitor.errors import (
    InvalidDateValue,
    InvalidFormat,
    InvalidParameters,
    InvalidRange,
    MissingParameters,
)
from relay_monitor.schemas import ThresholdUpdate, parse_readings_range, parse_threshold_update
from relay_monitor.utils.validation import is_valid_date_format, to_date, to_float

TODAY = date(2024, 3, 1)


def test_window_covers_whole_days():
    window = parse_readings_range("2024-02-28", "2024-02-29", TODAY)

    assert window.start_ts == datetime(2024, 2, 28, 0, 0, 0)
    assert window.end_ts == datetime(2024, 2, 29, 23, 59, 59)


def test_defaults_cross_month_boundary():
    window = parse_readings_range(None, None, TODAY)

    assert window.start_date == date(2024, 2, 29)
    assert window.end_date == TODAY


@pytest.mark.parametrize(
    "start, end, error",
    [
        ("2024-00-10", "2024-01-10", InvalidFormat),
        ("2024-01-32", "2024-02-01", InvalidFormat),
        ("2024-01-01", "2024/01/02", InvalidFormat),
        ("2023-02-29", "2023-03-01", InvalidDateValue),
        ("2024-06-10", "2024-06-09", InvalidRange),
    ],
)
def test_invalid_ranges(start, end, error):
    with pytest.raises(error):
        parse_readings_range(start, end, TODAY)


def test_format_check_precedes_value_check():
    # one bad format and one impossible day: the format problem wins
    with pytest.raises(InvalidFormat):
        parse_readings_range("2023-02-29", "junk", TODAY)


def test_date_helpers():
    assert is_valid_date_format("2024-12-31")
    assert not is_valid_date_format(None)
    assert not is_valid_date_format("2024-12-31 ")
    assert to_date("2024-04-31") is None
    assert to_date("2024-04-30") == date(2024, 4, 30)
    assert to_float("21.5") == 21.5
    assert to_float(None) is None


def test_threshold_body_is_typed():
    update = parse_threshold_update(b'{"temp_threshold": 30.5, "hum_threshold": 60, "note": "ignored"}')

    assert update == ThresholdUpdate(temp_threshold=30.5, hum_threshold=60.0)
    assert isinstance(update.hum_threshold, float)


@pytest.mark.parametrize(
    "body, error",
    [
        (b"", MissingParameters),
        (b"{}", MissingParameters),
        (b'{"hum_threshold": 60}', MissingParameters),
        (b'"30.5"', MissingParameters),
        (b'{"temp_threshold": "hot"}', MissingParameters),
        (b'{"temp_threshold": [30], "hum_threshold": null}', MissingParameters),
        (b'{"temp_threshold": [30], "hum_threshold": 60}', InvalidParameters),
        (b'{"temp_threshold": 30, "hum_threshold": "humid"}', InvalidParameters),
    ],
)
def test_threshold_body_errors(body, error):
    with pytest.raises(error):
        parse_threshold_update(body)


def test_error_payloads():
    assert MissingParameters().to_payload() == {"status": "failed", "error": "Missing parameters"}
    assert InvalidRange().to_payload() == {
        "status": "error",
        "message": "End date cannot be before start date",
    }
    assert InvalidFormat.status_code == 400
