"""
Configuration management for the Catering Logistics application.

This module handles:
- Database path configuration
- Environment-specific configuration (development vs. production)
- Display locale for amounts and dates
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .constants import (
    DATABASE_FILENAME,
    DEFAULT_LOCALE,
    LOCALE_CONVENTIONS,
)

logger = logging.getLogger(__name__)


class Config:
    """
    Application configuration manager.

    Handles database location, environment settings and the display locale.
    """

    def __init__(self, environment: str = "production", locale: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            environment: Environment mode - 'production' or 'development'
            locale: Display locale; falls back to CATERING_LOCALE, then DEFAULT_LOCALE
        """
        self.environment = environment

        if environment == "development":
            self._base_dir = self._get_project_data_dir()
        else:
            self._base_dir = self._get_user_data_dir()

        self._database_dir = self._base_dir
        self._database_path = self._database_dir / DATABASE_FILENAME
        self._database_url_override = os.environ.get("CATERING_DATABASE_URL")

        self._locale = self._resolve_locale(locale or os.environ.get("CATERING_LOCALE"))

    def _get_project_data_dir(self) -> Path:
        """
        Get the project's data directory for development.

        Returns:
            Path to project data/ directory
        """
        project_root = Path(__file__).parent.parent.parent
        return project_root / "data"

    def _get_user_data_dir(self) -> Path:
        """
        Get the per-user data directory for production.

        Returns:
            Path to the application folder in the user's home directory
        """
        return Path.home() / ".catering_logistics"

    @staticmethod
    def _resolve_locale(locale: Optional[str]) -> str:
        if not locale:
            return DEFAULT_LOCALE
        short = locale.split("_")[0].split("-")[0].lower()
        if short not in LOCALE_CONVENTIONS:
            logger.warning(f"Unsupported locale '{locale}', using '{DEFAULT_LOCALE}'")
            return DEFAULT_LOCALE
        return short

    def ensure_directories(self):
        """Create the database directory if it doesn't exist."""
        self._database_dir.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        """Full path to the database file."""
        return self._database_path

    @property
    def database_url(self) -> str:
        """
        SQLAlchemy database URL.

        Returns:
            CATERING_DATABASE_URL if set, otherwise a SQLite URL for database_path
        """
        if self._database_url_override:
            return self._database_url_override
        db_path_str = str(self._database_path).replace("\\", "/")
        return f"sqlite:///{db_path_str}"

    @property
    def locale(self) -> str:
        """Display locale used for amounts and dates."""
        return self._locale

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def database_exists(self) -> bool:
        """
        Check if database file exists.

        Returns:
            True if database file exists, False otherwise
        """
        return self._database_path.exists()

    def __repr__(self) -> str:
        return (
            f"Config(environment='{self.environment}', "
            f"database_path='{self._database_path}', locale='{self._locale}')"
        )


_config_instance: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Get the global configuration instance.

    Once created, the singleton's environment cannot be changed by passing
    a different environment argument.

    Args:
        environment: Optional environment for initial creation. If None, uses
                    CATERING_ENV or defaults to production. Ignored if
                    singleton already exists.

    Returns:
        Config instance
    """
    global _config_instance

    if _config_instance is None:
        if environment is None:
            environment = os.environ.get("CATERING_ENV", "production")
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


def get_database_url() -> str:
    """
    Get the database URL.

    Returns:
        SQLAlchemy database URL string
    """
    return get_config().database_url
