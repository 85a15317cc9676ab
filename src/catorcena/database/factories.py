"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

import structlog

from catorcena.database.sqlalchemy_db import SQLAlchemyDatabase

logger = structlog.get_logger()


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CATORCENA_DB_PATH
            environment variable, then defaults to ~/.catorcena/catorcena.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("CATORCENA_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".catorcena"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "catorcena.db")

    logger.debug("database_opened", path=database_path)
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
