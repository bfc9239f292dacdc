"""
Typed request models.

Query strings and JSON bodies are turned into these before any SQL runs,
so handlers only ever deal with checked values.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import from_json

from relay_monitor.errors import (
    InvalidDateValue,
    InvalidFormat,
    InvalidParameters,
    InvalidRange,
    MissingParameters,
)
from relay_monitor.utils.validation import is_valid_date_format, to_date

DAY_END = time(23, 59, 59)


@dataclass(frozen=True)
class ReadingsRange:
    start_date: date
    end_date: date

    @property
    def start_ts(self) -> datetime:
        return datetime.combine(self.start_date, time.min)

    @property
    def end_ts(self) -> datetime:
        return datetime.combine(self.end_date, DAY_END)


def parse_readings_range(
    start_date: str | None,
    end_date: str | None,
    today: date,
) -> ReadingsRange:
    """
    Validate the ``start_date``/``end_date`` query parameters.

    Missing values default to yesterday and today. Raises InvalidFormat,
    InvalidDateValue or InvalidRange.
    """
    if start_date is None:
        start_date = (today - timedelta(days=1)).isoformat()
    if end_date is None:
        end_date = today.isoformat()

    if not is_valid_date_format(start_date) or not is_valid_date_format(end_date):
        raise InvalidFormat()

    start = to_date(start_date)
    end = to_date(end_date)
    if start is None or end is None:
        raise InvalidDateValue()
    if end < start:
        raise InvalidRange()
    return ReadingsRange(start_date=start, end_date=end)


class ThresholdUpdateRequest(BaseModel):
    """
    JSON body for POST /api/threshold.

    Both fields are optional at the model level so that an absent field
    is reported as "Missing parameters" rather than a generic 422.
    """
    model_config = ConfigDict(extra="ignore")

    temp_threshold: Optional[float] = Field(default=None, allow_inf_nan=False, description="Temperature trigger (°C)")
    hum_threshold: Optional[float] = Field(default=None, allow_inf_nan=False, description="Humidity trigger (%RH)")


@dataclass(frozen=True)
class ThresholdUpdate:
    temp_threshold: float
    hum_threshold: float


def parse_threshold_update(body: bytes) -> ThresholdUpdate:
    """
    Parse a raw request body into a ThresholdUpdate.

    Bodies that are not a JSON object count as carrying no parameters,
    and a missing field is reported before an invalid one.
    Raises MissingParameters or InvalidParameters.
    """
    try:
        request = ThresholdUpdateRequest.model_validate_json(body or b"null")
    except ValidationError as exc:
        # errors without a field location mean the body was not a JSON object
        if any(not err["loc"] for err in exc.errors()):
            raise MissingParameters() from exc
        # an absent field outranks a malformed one
        payload = from_json(body)
        if any(payload.get(name) is None for name in ThresholdUpdateRequest.model_fields):
            raise MissingParameters() from exc
        raise InvalidParameters() from exc

    if request.temp_threshold is None or request.hum_threshold is None:
        raise MissingParameters()
    return ThresholdUpdate(
        temp_threshold=request.temp_threshold,
        hum_threshold=request.hum_threshold,
    )
