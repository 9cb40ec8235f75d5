"""Configuration management for the Party XP Calculator.

Centralized configuration using pydantic-settings, supporting environment
variables, .env files, and runtime overrides.

Example:
    >>> from xp_calculator.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    'Party XP Calculator'

Environment Variables:
    XP_CALCULATOR_DATABASE_PATH: Path to the SQLite database file
    XP_CALCULATOR_STORAGE_KEY: Key holding the saved-calculation list
    XP_CALCULATOR_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    XP_CALCULATOR_JSON_LOGS: Emit JSON log lines instead of console output
    XP_CALCULATOR_UI_PAGE_TITLE: Browser page title
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xp_calculator.core.constants import DEFAULT_STORAGE_KEY
from xp_calculator.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for saved-calculation storage.

    Attributes:
        database_path: Path to the SQLite database file.
        storage_key: Key under which the saved-calculation list is stored.
    """

    model_config = SettingsConfigDict(
        env_prefix="XP_CALCULATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/xp_calculator.db"),
        description="Path to SQLite database",
    )
    storage_key: str = Field(
        default=DEFAULT_STORAGE_KEY,
        description="Key holding the saved-calculation list",
    )

    @field_validator("storage_key", mode="after")
    @classmethod
    def validate_storage_key(cls, value: str) -> str:
        """Reject blank storage keys.

        Raises:
            ConfigurationError: If the key is empty or whitespace.
        """
        if not value.strip():
            raise ConfigurationError(
                "storage_key must not be blank",
                config_key="storage_key",
            )
        return value


class UISettings(BaseSettings):
    """Configuration for the Streamlit UI.

    Attributes:
        page_title: Browser page title.
        layout: Streamlit page layout.
        show_breakdown: Show the per-character XP breakdown under the totals.
    """

    model_config = SettingsConfigDict(
        env_prefix="XP_CALCULATOR_UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    page_title: str = Field(
        default="Party XP Calculator",
        description="Browser page title",
    )
    layout: Literal["centered", "wide"] = Field(
        default="wide",
        description="Streamlit page layout",
    )
    show_breakdown: bool = Field(
        default=True,
        description="Show per-character XP breakdown",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode, which also forces DEBUG logging.
        log_level: Application logging level.
        json_logs: Render logs as JSON.
        storage: Storage settings.
        ui: UI settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="XP_CALCULATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Party XP Calculator",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render logs as JSON",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    ui: UISettings = Field(default_factory=UISettings)

    @property
    def effective_log_level(self) -> str:
        """Log level to configure; debug mode forces DEBUG."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If settings cannot be loaded.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "UISettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
