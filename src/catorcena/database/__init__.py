"""Database layer for catorcena."""

from catorcena.database.base import Database
from catorcena.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
