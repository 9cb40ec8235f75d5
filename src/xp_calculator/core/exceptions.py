"""Custom exception hierarchy for the Party XP Calculator.

All exceptions inherit from XpCalculatorError, enabling unified error
handling at the UI boundary while preserving domain-specific context in
the ``details`` mapping.

Example:
    >>> from xp_calculator.core.exceptions import ValidationError
    >>> raise ValidationError("At least one character is required", field_name="characters")
"""

from __future__ import annotations

from typing import Any


class XpCalculatorError(Exception):
    """Base exception for all Party XP Calculator errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(XpCalculatorError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(XpCalculatorError):
    """Raised when calculation input fails validation.

    The engine raises this before doing any arithmetic, e.g. when the
    party or the monster list is empty.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Engine & Storage Exceptions
# =============================================================================


class CalculationError(XpCalculatorError):
    """Raised when the XP engine cannot produce a consistent result."""


class StorageError(XpCalculatorError):
    """Raised when saved calculations cannot be safely read or written.

    Listing never raises; it falls back to an empty list. Saving and
    deleting raise instead of overwriting a list they could not read.
    """

    def __init__(
        self,
        message: str,
        *,
        storage_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error with storage key context.

        Args:
            message: Human-readable error description.
            storage_key: Key of the list that could not be read or written.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if storage_key:
            combined_details["storage_key"] = storage_key
        super().__init__(message, details=combined_details)


# =============================================================================
# UI Domain Exceptions
# =============================================================================


class UIError(XpCalculatorError):
    """Base exception for all UI-related errors."""


class SessionStateError(UIError):
    """Raised when Streamlit session state holds something unexpected."""


__all__ = [
    "XpCalculatorError",
    "ConfigurationError",
    "ValidationError",
    "CalculationError",
    "StorageError",
    "UIError",
    "SessionStateError",
]
