"""
Create the AuditTrack tables directly from the models.

For local development and sqlite. Deployed databases are managed with
Alembic (`scripts/release.py`).

Usage:
  python scripts/init_db.py
"""
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.audittrack.models import Base
from scripts._db_utils import create_script_engine, script_database_url


def init_schema(*, database_url: str | None = None) -> list[str]:
    """Create any missing tables. Idempotent; existing tables are left alone."""
    db_url = script_database_url(database_url)
    engine = create_script_engine(db_url)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    return sorted(Base.metadata.tables)


def main() -> None:
    tables = init_schema(database_url=None)
    print("Initialized database.")
    print(f"Tables: {', '.join(tables)}")


if __name__ == "__main__":
    main()
