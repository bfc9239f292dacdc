import os
import tempfile
from pathlib import Path

ACCESS_LOG = Path(tempfile.mkdtemp(prefix="relay-monitor-")) / "readings_access.log"

# must be in place before relay_monitor reads its configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["READINGS_ACCESS_LOG"] = str(ACCESS_LOG)
os.environ["APP_TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from relay_monitor.database import get_db, init_db
from relay_monitor.models import THRESHOLD_ROW_ID, Reading, Threshold


def make_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def override_db(session_factory):
    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db


@pytest.fixture
def engine():
    engine = make_engine()
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    override_db(session_factory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def add_readings(session_factory):
    def _add(*rows):
        with session_factory() as db:
            db.add_all([Reading(**row) for row in rows])
            db.commit()

    return _add


@pytest.fixture
def set_threshold(session_factory):
    def _set(temp, hum, timestamp):
        with session_factory() as db:
            db.merge(Threshold(id=THRESHOLD_ROW_ID, temp_threshold=temp, hum_threshold=hum, timestamp=timestamp))
            db.commit()

    return _set


class FailingSession:
    """Stands in for a Session whose statements all blow up."""

    def __init__(self, exc):
        self.exc = exc
        self.rolled_back = False

    def execute(self, *args, **kwargs):
        raise self.exc

    def connection(self):
        raise self.exc

    def commit(self):
        pass

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


@pytest.fixture
def failing_client():
    def _make(exc):
        session = FailingSession(exc)
        app.dependency_overrides[get_db] = lambda: session
        return TestClient(app), session

    yield _make
    app.dependency_overrides.clear()
