"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        XpCalculatorError: Base exception for all application errors.
        ConfigurationError: Configuration-related errors.
        ValidationError: Calculation input errors.
        StorageError: Saved-calculation write failures.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
"""

from __future__ import annotations

from xp_calculator.core.config import (
    Settings,
    StorageSettings,
    UISettings,
    clear_settings_cache,
    get_settings,
)
from xp_calculator.core.exceptions import (
    CalculationError,
    ConfigurationError,
    SessionStateError,
    StorageError,
    UIError,
    ValidationError,
    XpCalculatorError,
)
from xp_calculator.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "XpCalculatorError",
    "ConfigurationError",
    "ValidationError",
    "CalculationError",
    "StorageError",
    "UIError",
    "SessionStateError",
    # Configuration
    "Settings",
    "StorageSettings",
    "UISettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
