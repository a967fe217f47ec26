"""
Create Database Tables

Builds the site schema straight from the ORM models, bypassing Alembic.
Meant for local development and demo databases.

Usage:
    python scripts/create_database_tables.py [--drop]
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import sqlalchemy as sa

from src.estatesite.db.base import Base
from src.estatesite.db.session import create_all_tables, engine
from src.estatesite.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the site tables from the ORM models.")
    parser.add_argument("--drop", action="store_true", help="Drop existing site tables before creating them.")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging()

    try:
        create_all_tables(drop=args.drop)
    except sa.exc.SQLAlchemyError as e:
        logger.error("table_creation_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)

    present = set(sa.inspect(engine).get_table_names())
    missing = sorted(set(Base.metadata.tables) - present)
    if missing:
        logger.error("tables_missing", tables=missing)
        sys.exit(1)

    print(f"Site schema ready: {len(Base.metadata.tables)} tables on {engine.url.render_as_string(hide_password=True)}")


if __name__ == "__main__":
    main()
