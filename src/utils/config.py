"""
Configuration management for the Cake Costing application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- Costing defaults that can be overridden from the environment

Environment variables:
    CAKE_COSTING_ENV: 'production' (default) or 'development'
    CAKE_COSTING_DATA_DIR: Directory holding the SQLite database
    CAKE_COSTING_DB_TIMEOUT: SQLite busy timeout in seconds (default 30)
    CAKE_COSTING_MARKUP_PERCENT: Default markup as a fraction (default 0.70)
"""

import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional

from .constants import (
    DATABASE_FILENAME,
    DEFAULT_MARKUP_PERCENT,
    MAX_MARKUP_PERCENT,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "CAKE_COSTING"
DEFAULT_DB_TIMEOUT = 30


class Config:
    """
    Where the catalog database lives and which costing defaults apply.

    Values come from the environment once, when the instance is created.
    An override that does not parse is logged and the default is used.
    """

    def __init__(self, environment: str = "production"):
        """
        Args:
            environment: 'production' keeps the database under ~/Documents,
                'development' under the project's data/ folder
        """
        self.environment = environment

        data_dir_override = os.environ.get(f"{ENV_PREFIX}_DATA_DIR")
        if data_dir_override:
            self._database_dir = Path(data_dir_override)
        elif environment == "development":
            self._database_dir = Path(__file__).parent.parent.parent / "data"
        else:
            self._database_dir = Path.home() / "Documents" / "CakeCosting"
        self._database_path = self._database_dir / DATABASE_FILENAME

        self._db_timeout = self._read_env("DB_TIMEOUT", int, DEFAULT_DB_TIMEOUT, lambda v: v > 0)
        self._default_markup_percent = self._read_env(
            "MARKUP_PERCENT",
            lambda raw: Decimal(raw.strip()),
            Decimal(DEFAULT_MARKUP_PERCENT),
            lambda v: v.is_finite() and 0 <= v <= Decimal(str(MAX_MARKUP_PERCENT)),
        )

    @staticmethod
    def _read_env(suffix: str, parse, default, accept):
        name = f"{ENV_PREFIX}_{suffix}"
        raw = os.environ.get(name)
        if raw is None:
            return default
        try:
            value = parse(raw)
        except (ValueError, InvalidOperation):
            logger.warning(f"Invalid {name}={raw!r}, using default {default}")
            return default
        if not accept(value):
            logger.warning(f"Invalid {name}={raw!r} (out of range), using default {default}")
            return default
        return value

    def ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._database_path

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the SQLite file (forward slashes on every platform)."""
        return "sqlite:///" + str(self._database_path).replace("\\", "/")

    @property
    def db_timeout(self) -> int:
        """SQLite busy timeout in seconds."""
        return self._db_timeout

    @property
    def default_markup_percent(self) -> Decimal:
        """Markup fraction used when neither the request nor the settings table supply one."""
        return self._default_markup_percent

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def database_exists(self) -> bool:
        return self._database_path.exists()

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', database_path='{self._database_path}')"


# Global configuration instance
_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument; this prevents switching databases
    mid-session.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    CAKE_COSTING_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get(f"{ENV_PREFIX}_ENV", "production")
        _config_instance = Config(environment)
    elif environment is not None and environment != _config_instance.environment:
        logger.warning(
            f"get_config() called with environment='{environment}' but singleton "
            f"already exists with environment='{_config_instance.environment}'. "
            f"Returning existing singleton to prevent database switching."
        )

    return _config_instance


def reset_config():
    """
    Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance
    _config_instance = None
