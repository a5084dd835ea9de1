#!/usr/bin/env python3
"""
Database initialization script for the payment harness.

This script handles:
- Database creation (for PostgreSQL)
- Creating the events table
- Optionally wiping stored events

Usage:
    python scripts/init_db.py [--check-only] [--clear-events]
"""

import sys
import argparse
from pathlib import Path
from urllib.parse import urlparse

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from harness.core.config import settings
from harness.db.base import Base
from harness.db.session import engine, session_scope
from harness.models import Event
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
import logging

# configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_database_if_not_exists() -> bool:
    """create db if it doesn't exist (PostgreSQL only)."""
    database_url = settings.DATABASE_URL
    if not database_url.startswith("postgresql"):
        logger.info("Database URL is not PostgreSQL, skipping database creation")
        return True

    try:
        parsed = urlparse(database_url)
        database_name = parsed.path[1:]
        postgres_engine = create_engine(f"{parsed.scheme}://{parsed.netloc}/postgres", isolation_level="AUTOCOMMIT")

        with postgres_engine.connect() as conn:
            result = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": database_name}
            )
            if result.fetchone() is None:
                logger.info(f"Creating database: {database_name}")
                conn.execute(text(f'CREATE DATABASE "{database_name}"'))
            else:
                logger.info(f"Database {database_name} already exists")

        postgres_engine.dispose()
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error creating database: {e}")
        return False


def check_connection() -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection OK")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def create_tables() -> bool:
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Events table ready")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error creating tables: {e}")
        return False


def clear_events() -> bool:
    try:
        with session_scope() as db:
            deleted = db.query(Event).delete()
        logger.info(f"Deleted {deleted} stored events")
        return True
    except SQLAlchemyError as e:
        logger.error(f"Error deleting events: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Initialize payment harness database")
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check database connection, don't create tables"
    )
    parser.add_argument(
        "--clear-events",
        action="store_true",
        help="Delete every stored event notification (DESTRUCTIVE)"
    )
    args = parser.parse_args()

    if args.check_only:
        return 0 if check_connection() else 1

    steps = [create_database_if_not_exists, check_connection, create_tables]
    if args.clear_events:
        steps.append(clear_events)

    for step in steps:
        if not step():
            return 1
    logger.info("Database initialization complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
