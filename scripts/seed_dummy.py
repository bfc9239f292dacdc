"""
Backfill dummy readings between two datetimes and seed the threshold row.

Usage:
  python -m scripts.seed_dummy --start 2026-10-01 --end 2026-10-19 --step-minutes 30 --devices relay-01 relay-02

Defaults:
  start: 24 hours before end
  end: now
  step: 30 minutes
  thresholds: 30.0 °C / 70.0 %RH (only written when no threshold row exists)
"""

from __future__ import annotations

import argparse
import random
from datetime import datetime, timedelta

from sqlalchemy import select

from relay_monitor.database import SessionLocal, init_db
from relay_monitor.models import THRESHOLD_ROW_ID, Reading, Threshold


def parse_dt(value: str) -> datetime:
    return datetime.fromisoformat(value)


def relay_status_for(temperature: float, humidity: float, threshold: Threshold) -> str:
    # relay closes once either reading crosses its trigger
    if temperature >= threshold.temp_threshold or humidity >= threshold.hum_threshold:
        return "ON"
    return "OFF"


def build_reading(device_id: str, ts: datetime, threshold: Threshold) -> Reading:
    temperature = round(random.uniform(threshold.temp_threshold - 6.0, threshold.temp_threshold + 2.0), 1)
    humidity = round(random.uniform(threshold.hum_threshold - 20.0, threshold.hum_threshold + 5.0), 1)
    humidity = max(0.0, min(100.0, humidity))
    return Reading(
        device_id=device_id,
        temperature=temperature,
        humidity=humidity,
        relay_status=relay_status_for(temperature, humidity, threshold),
        timestamp=ts,
    )


def main():
    parser = argparse.ArgumentParser(description="Backfill dummy relay readings.")
    parser.add_argument("--end", type=parse_dt, default=datetime.now().replace(microsecond=0), help="ISO datetime end (default now)")
    parser.add_argument("--start", type=parse_dt, default=None, help="ISO datetime start (default 24h before end)")
    parser.add_argument("--step-minutes", type=int, default=30, help="Step in minutes (default 30)")
    parser.add_argument("--devices", nargs="*", default=["relay-01"], help="Device ids to generate readings for")
    parser.add_argument("--temp-threshold", type=float, default=30.0)
    parser.add_argument("--hum-threshold", type=float, default=70.0)
    args = parser.parse_args()

    end = args.end
    start = args.start or end - timedelta(hours=24)
    step = timedelta(minutes=max(1, args.step_minutes))

    init_db()
    total_inserted = 0
    with SessionLocal() as db:
        threshold = db.scalars(select(Threshold).where(Threshold.id == THRESHOLD_ROW_ID)).first()
        if threshold is None:
            threshold = Threshold(
                id=THRESHOLD_ROW_ID,
                temp_threshold=args.temp_threshold,
                hum_threshold=args.hum_threshold,
                timestamp=datetime.now().replace(microsecond=0),
            )
            db.add(threshold)

        ts = start
        while ts <= end:
            for device_id in args.devices:
                db.add(build_reading(device_id, ts, threshold))
                total_inserted += 1
            ts += step
        db.commit()

    print(f"Seed complete: inserted={total_inserted}, start={start}, end={end}, step_minutes={args.step_minutes}")


if __name__ == "__main__":
    main()
