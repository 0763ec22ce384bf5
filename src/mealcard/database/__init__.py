"""Database layer for mealcard application."""

from mealcard.database.base import Database
from mealcard.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
