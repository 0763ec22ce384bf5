"""Database factory functions for creating database instances."""

from typing import Optional

from mealcard.config import Settings, load_settings
from mealcard.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(
    database_path: Optional[str] = None, timeout: Optional[float] = None
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks MEALCARD_DB_PATH
            environment variable, then defaults to ~/.mealcard/mealcard.db
        timeout: Busy timeout in seconds. If None, uses MEALCARD_DB_TIMEOUT

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    settings = load_settings()
    if database_path is None:
        database_path = settings.database_path
    if timeout is None:
        timeout = settings.db_timeout

    database_url = Settings(database_path=database_path).resolve_database_url()
    return SQLAlchemyDatabase(database_url, timeout=timeout)


def create_database(settings: Optional[Settings] = None) -> SQLAlchemyDatabase:
    """Create a database instance from settings.

    MEALCARD_DATABASE_URL wins over MEALCARD_DB_PATH when both are set.
    """
    if settings is None:
        settings = load_settings()
    return SQLAlchemyDatabase(settings.resolve_database_url(), timeout=settings.db_timeout)
