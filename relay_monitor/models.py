from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    func,
)

from .database import Base

THRESHOLD_ROW_ID = 1


class Reading(Base):
    __tablename__ = "tbl_dht11"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    device_id = Column(String(64), nullable=False, index=True)
    temperature = Column(Float, nullable=True)
    humidity = Column(Float, nullable=True)
    relay_status = Column(String(16), nullable=True)  # "ON" / "OFF" as reported by the relay
    timestamp = Column(DateTime, nullable=False, index=True, server_default=func.current_timestamp())


class Threshold(Base):
    """Current trigger values. Single row, pinned to ``THRESHOLD_ROW_ID``."""

    __tablename__ = "tbl_threshold"
    __table_args__ = (
        CheckConstraint(f"id = {THRESHOLD_ROW_ID}", name="ck_threshold_singleton"),
    )

    id = Column(Integer, primary_key=True, autoincrement=False, default=THRESHOLD_ROW_ID)
    temp_threshold = Column(Float, nullable=False)
    hum_threshold = Column(Float, nullable=False)
    timestamp = Column(DateTime, nullable=False, server_default=func.current_timestamp())
