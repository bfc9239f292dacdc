import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from relay_monitor.database import get_db
from relay_monitor.errors import NotFound, QueryFailed, UpdateFailed
from relay_monitor.models import THRESHOLD_ROW_ID
from relay_monitor.schemas import ThresholdUpdate, ThresholdUpdateRequest, parse_threshold_update
from relay_monitor.utils.validation import to_float

logger = logging.getLogger(__name__)
router = APIRouter(tags=["thresholds"])

LATEST_THRESHOLD_SQL = (
    "SELECT temp_threshold, hum_threshold FROM tbl_threshold "
    "ORDER BY timestamp DESC LIMIT 1"
)
UPDATE_THRESHOLD_SQL = (
    "UPDATE tbl_threshold "
    "SET temp_threshold = :temp, hum_threshold = :hum, timestamp = CURRENT_TIMESTAMP "
    "WHERE id = :row_id"
)
INSERT_THRESHOLD_SQL = (
    "INSERT INTO tbl_threshold (id, temp_threshold, hum_threshold, timestamp) "
    "VALUES (:row_id, :temp, :hum, CURRENT_TIMESTAMP)"
)
# tables created before the singleton id column existed
LEGACY_UPDATE_THRESHOLD_SQL = (
    "UPDATE tbl_threshold "
    "SET temp_threshold = :temp, hum_threshold = :hum, timestamp = CURRENT_TIMESTAMP"
)
LEGACY_INSERT_THRESHOLD_SQL = (
    "INSERT INTO tbl_threshold (temp_threshold, hum_threshold, timestamp) "
    "VALUES (:temp, :hum, CURRENT_TIMESTAMP)"
)


def load_threshold(db: Session) -> Dict[str, float | None]:
    try:
        row = db.execute(text(LATEST_THRESHOLD_SQL)).mappings().first()
    except SQLAlchemyError as exc:
        logger.warning("Threshold query failed: %s", exc)
        raise QueryFailed(str(getattr(exc, "orig", None) or exc)) from exc
    if row is None:
        raise NotFound()
    return {
        'temp_threshold': to_float(row['temp_threshold']),
        'hum_threshold': to_float(row['hum_threshold']),
    }


def has_singleton_key(db: Session) -> bool:
    columns = inspect(db.connection()).get_columns("tbl_threshold")
    return any(column["name"] == "id" for column in columns)


def _upsert_singleton(db: Session, params: Dict[str, Any]) -> None:
    result = db.execute(text(UPDATE_THRESHOLD_SQL), params)
    if result.rowcount == 0:
        try:
            db.execute(text(INSERT_THRESHOLD_SQL), params)
        except IntegrityError:
            # row already there: created concurrently, or an unchanged
            # update the server reported as zero affected rows
            db.rollback()
            db.execute(text(UPDATE_THRESHOLD_SQL), params)


def _overwrite_legacy(db: Session, params: Dict[str, Any]) -> None:
    # no key to target: every row is rewritten, as the old PHP endpoint did
    result = db.execute(text(LEGACY_UPDATE_THRESHOLD_SQL), params)
    if result.rowcount == 0:
        db.execute(text(LEGACY_INSERT_THRESHOLD_SQL), params)


def store_threshold(db: Session, update: ThresholdUpdate) -> None:
    """
    Overwrite the current threshold, creating it on first use.

    Tables with the ``id`` column get a keyed singleton upsert; tables
    without it keep the unfiltered update.
    """
    params = {
        'row_id': THRESHOLD_ROW_ID,
        'temp': update.temp_threshold,
        'hum': update.hum_threshold,
    }
    try:
        if has_singleton_key(db):
            _upsert_singleton(db, params)
        else:
            logger.warning("tbl_threshold has no id column; updating every row")
            _overwrite_legacy(db, params)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Threshold update failed (temp=%s, hum=%s)", update.temp_threshold, update.hum_threshold)
        raise UpdateFailed(str(getattr(exc, "orig", None) or exc)) from exc
    logger.info("Thresholds set to temp=%s hum=%s", update.temp_threshold, update.hum_threshold)


@router.get("/api/threshold")
@router.get("/threshold_data/load_threshold.php", include_in_schema=False)
def api_threshold(db: Session = Depends(get_db)) -> Dict[str, Any]:
    return {'status': 'success', **load_threshold(db)}


@router.post(
    "/api/threshold",
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": ThresholdUpdateRequest.model_json_schema()}},
            "required": True,
        }
    },
)
@router.post("/threshold_data/update_threshold.php", include_in_schema=False)
async def api_threshold_update(request: Request, db: Session = Depends(get_db)) -> Dict[str, Any]:
    update = parse_threshold_update(await request.body())
    await run_in_threadpool(store_threshold, db, update)
    return {'status': 'success'}
