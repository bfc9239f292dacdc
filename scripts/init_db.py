"""
Create the readings and threshold tables on the configured database.

Usage:
  python -m scripts.init_db
"""

from relay_monitor.database import DATABASE_URL, init_db


def main():
    init_db()
    print(f"Tables ready on {DATABASE_URL!r}")


if __name__ == "__main__":
    main()
