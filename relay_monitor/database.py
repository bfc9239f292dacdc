# relay_monitor/database.py

import os
from dataclasses import dataclass

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL
from sqlalchemy.orm import declarative_base, sessionmaker

from relay_monitor.config import SQL_ECHO


@dataclass(frozen=True)
class DatabaseConfig:
    username: str
    password: str
    host: str
    port: int
    database: str
    driver: str = "mysql+mysqlconnector"

    @property
    def url(self) -> URL:
        return URL.create(
            drivername=self.driver,
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        def _env(name: str, fallback: str) -> str:
            return os.getenv(f"MYSQL_{name}", fallback)

        return cls(
            username=_env("USER", "relay"),
            password=_env("PASSWORD", ""),
            host=_env("HOST", "localhost"),
            port=int(_env("PORT", "3306")),
            database=_env("DB", "relay_monitoring"),
            driver=_env("DRIVER", "mysql+mysqlconnector"),
        )


DEFAULT_DB_CONFIG = DatabaseConfig.from_env()

# a full URL (e.g. sqlite:///relay.db for local work) wins over MYSQL_*
DATABASE_URL = os.getenv("DATABASE_URL") or DEFAULT_DB_CONFIG.url

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    echo=SQL_ECHO,
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Create tbl_dht11 and tbl_threshold if they do not exist yet."""
    # models register themselves on Base.metadata at import
    from relay_monitor import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
