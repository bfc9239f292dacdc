"""
Input validation and conversion helpers.
"""

import re
from datetime import date
from typing import Any

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)


def is_valid_date_format(value: str | None) -> bool:
    """
    Check that a string looks like a ``YYYY-MM-DD`` date.

    Month and day only have to be in their nominal ranges (1-12, 1-31);
    whether the day exists in that month is checked by :func:`to_date`.
    """
    if not value or not DATE_PATTERN.fullmatch(value):
        return False
    _, month, day = (int(part) for part in value.split("-"))
    return 1 <= month <= 12 and 1 <= day <= 31


def to_date(value: str) -> date | None:
    """Build a calendar date from a well-formed string, None if it does not exist."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def to_float(value: Any) -> float | None:
    """Numeric column value as float; NULL and unparseable values become None."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
