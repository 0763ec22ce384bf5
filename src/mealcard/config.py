"""Runtime configuration read from MEALCARD_* environment variables."""

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Mapping, Optional

from dateutil import tz

DEFAULT_DB_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one process."""

    database_path: Optional[str] = None
    database_url: Optional[str] = None
    db_timeout: float = DEFAULT_DB_TIMEOUT
    starting_balance: int = 0
    timezone: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    def resolve_database_url(self) -> str:
        """Return the SQLAlchemy URL, falling back to ~/.mealcard/mealcard.db."""
        if self.database_url:
            return self.database_url

        database_path = self.database_path
        if database_path is None:
            db_dir = Path.home() / ".mealcard"
            db_dir.mkdir(exist_ok=True)
            database_path = str(db_dir / "mealcard.db")
        return f"sqlite:///{database_path}"

    def resolve_timezone(self) -> tzinfo:
        """Return the zone used to cut analytics days.

        Raises:
            ValueError: If the configured zone name is unknown
        """
        return resolve_timezone(self.timezone)


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Resolve an IANA zone name, or the server's local zone when name is empty."""
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone '{name}'")
    return zone


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from; defaults to os.environ

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    if environ is None:
        environ = os.environ

    timeout_str = environ.get("MEALCARD_DB_TIMEOUT")
    starting_str = environ.get("MEALCARD_STARTING_BALANCE")

    try:
        db_timeout = float(timeout_str) if timeout_str else DEFAULT_DB_TIMEOUT
    except ValueError:
        raise ValueError(f"MEALCARD_DB_TIMEOUT must be a number, got '{timeout_str}'")

    try:
        starting_balance = int(starting_str) if starting_str else 0
    except ValueError:
        raise ValueError(f"MEALCARD_STARTING_BALANCE must be an integer, got '{starting_str}'")
    if starting_balance < 0:
        raise ValueError("MEALCARD_STARTING_BALANCE cannot be negative")

    return Settings(
        database_path=environ.get("MEALCARD_DB_PATH") or None,
        database_url=environ.get("MEALCARD_DATABASE_URL") or None,
        db_timeout=db_timeout,
        starting_balance=starting_balance,
        timezone=environ.get("MEALCARD_TIMEZONE") or None,
        log_level=(environ.get("MEALCARD_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
