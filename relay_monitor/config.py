import os
from zoneinfo import ZoneInfo


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "UTC"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# raw query parameters of every readings request land here; empty disables it
READINGS_ACCESS_LOG = os.getenv("READINGS_ACCESS_LOG", "logs/readings_access.log")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# append driver messages to 500 responses (debug only)
EXPOSE_DB_ERRORS = _env_flag("EXPOSE_DB_ERRORS")
SQL_ECHO = _env_flag("SQL_ECHO")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
