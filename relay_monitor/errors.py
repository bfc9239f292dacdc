"""
API errors.

Each error knows how it is rendered: the HTTP status, the ``status`` word
of the body and whether the text goes under ``message`` or ``error``.
Readings and threshold-fetch failures answer ``{"status": "error",
"message": ...}``, threshold-update failures answer ``{"status": "failed",
"error": ...}``, matching what deployed dashboards already parse.
"""

from typing import Any, Dict

from relay_monitor.config import EXPOSE_DB_ERRORS


class ApiError(Exception):
    status_code = 400
    status = "error"
    field = "message"
    text = "Bad request"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return self.text

    def to_payload(self) -> Dict[str, Any]:
        return {"status": self.status, self.field: self.message}


class DatabaseError(ApiError):
    """Failure reported by the driver; ``detail`` holds the driver text."""

    status_code = 500

    @property
    def message(self) -> str:
        if EXPOSE_DB_ERRORS and self.detail:
            return f"{self.text}: {self.detail}"
        return self.text


class InvalidFormat(ApiError):
    text = "Invalid date format (YYYY-MM-DD required)"


class InvalidDateValue(ApiError):
    text = "Invalid date values"


class InvalidRange(ApiError):
    text = "End date cannot be before start date"


class NotFound(ApiError):
    status_code = 404
    text = "No thresholds found"


class DbPrepareError(DatabaseError):
    text = "Database preparation error"


class DbExecError(DatabaseError):
    text = "Database execution error"


class QueryFailed(DatabaseError):
    text = "Query failed"


class MissingParameters(ApiError):
    status = "failed"
    field = "error"
    text = "Missing parameters"


class InvalidParameters(ApiError):
    status = "failed"
    field = "error"
    text = "Invalid parameters"


class UpdateFailed(DatabaseError):
    status = "failed"
    field = "error"
    text = "Database error"
