"""Create the lottery tables in the configured database.

Reads DATABASE_URL (or PG* variables) from .env / environment.

Usage:
  python scripts/create_tables.py
"""

from __future__ import annotations

import pathlib
import sys

from dotenv import load_dotenv
from sqlalchemy import text

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lottery_app.models.base import Base
from lottery_app.config import resolve_database_url
from lottery_app.db import create_app_engine

# Import models so they register with Base.metadata
from lottery_app import models  # noqa: F401


def main() -> int:
    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    engine = create_app_engine(resolve_database_url())
    Base.metadata.create_all(bind=engine)

    # create_all() skips constraints on tables that already exist.
    if engine.dialect.name == "postgresql":
        ddl = [
            "CREATE UNIQUE INDEX IF NOT EXISTS uq_booked_ticket_draw_number "
            "ON booked_tickets (lottery_id, draw_date, ticket_number)",
            "CREATE INDEX IF NOT EXISTS ix_booked_tickets_user_draw ON booked_tickets (user_id, draw_date)",
            "CREATE INDEX IF NOT EXISTS ix_withdrawal_requests_ticket ON withdrawal_requests (booked_ticket_id, status)",
        ]
        with engine.begin() as conn:
            for stmt in ddl:
                conn.execute(text(stmt))

    print("Tables created (or already exist).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
