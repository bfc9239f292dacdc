import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.exc import ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import Session

from relay_monitor.config import APP_TIMEZONE, LOG_FORMAT, READINGS_ACCESS_LOG
from relay_monitor.database import get_db
from relay_monitor.errors import DbExecError, DbPrepareError
from relay_monitor.schemas import ReadingsRange, parse_readings_range
from relay_monitor.utils.validation import to_float

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("relay_monitor.access.readings")

if READINGS_ACCESS_LOG and not access_logger.handlers:
    log_path = Path(READINGS_ACCESS_LOG)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    access_logger.addHandler(file_handler)
    access_logger.setLevel(logging.INFO)

router = APIRouter(tags=["readings"])

READINGS_SQL = (
    "SELECT device_id, temperature, humidity, relay_status, timestamp "
    "FROM tbl_dht11 "
    "WHERE timestamp BETWEEN :start_ts AND :end_ts "
    "ORDER BY timestamp DESC"
)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def today_local() -> date:
    return datetime.now(APP_TIMEZONE).date()


def _format_timestamp(value: Any) -> str | None:
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return None if value is None else str(value)


def fetch_readings(db: Session, window: ReadingsRange) -> List[Dict[str, Any]]:
    """Readings with ``timestamp`` inside the window, newest first."""
    stmt = text(READINGS_SQL).bindparams(
        bindparam("start_ts", value=window.start_ts, type_=DateTime),
        bindparam("end_ts", value=window.end_ts, type_=DateTime),
    ).columns(timestamp=DateTime)

    try:
        rows = db.execute(stmt).mappings().all()
    except ProgrammingError as exc:
        # the server refused the statement itself (syntax, unknown table/column)
        logger.warning("Readings statement rejected: %s", exc.orig)
        raise DbPrepareError(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        logger.warning("Failed to load readings for %s..%s: %s", window.start_date, window.end_date, exc)
        raise DbExecError(str(getattr(exc, "orig", None) or exc)) from exc

    return [
        {
            'device_id': row['device_id'],
            'temperature': to_float(row['temperature']),
            'humidity': to_float(row['humidity']),
            'relay_status': row['relay_status'],
            'timestamp': _format_timestamp(row['timestamp']),
        }
        for row in rows
    ]


@router.get("/api/readings")
@router.get("/relay_data/load_data.php", include_in_schema=False)
def api_readings(
    request: Request,
    start_date: str | None = Query(None, description='YYYY-MM-DD, defaults to yesterday'),
    end_date: str | None = Query(None, description='YYYY-MM-DD, defaults to today'),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    access_logger.info("Readings requested with params %s", dict(request.query_params))
    window = parse_readings_range(start_date, end_date, today_local())
    return {
        'status': 'success',
        'data': fetch_readings(db, window),
    }
