"""
shadowcache - Core Error Types

Defines the exception hierarchy for the caching layer.
All exceptions inherit from ShadowCacheError for consistent error handling.

Backend call failures are deliberately absent from this module: stores log
them and report a miss (or a failed write) instead of raising.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for structured error reporting.
    """

    # Configuration errors
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    FEATURE_DISABLED = "FEATURE_DISABLED"

    # Startup errors
    INITIALIZATION_FAILED = "INITIALIZATION_FAILED"

    # Cache errors
    CACHE_FAILURE = "CACHE_FAILURE"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ShadowCacheError(Exception):
    """Base exception for all shadowcache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logs and API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ShadowCacheError):
    """Raised when configuration is invalid or a disabled feature is used."""

    pass


class InitializationError(ShadowCacheError):
    """Raised when a cache backend cannot be constructed (e.g. client library missing)."""

    def __init__(
        self,
        message: str,
        package: str | None = None,
        install_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if install_hint:
            message += f". Install with: {install_hint}"

        error_details = details or {}
        error_details.update({"package": package, "install_hint": install_hint})

        super().__init__(message, error_details)
        self.package = package
        self.install_hint = install_hint


class CacheError(ShadowCacheError):
    """Raised when a cache operation cannot proceed."""

    pass


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        ErrorCode for the exception
    """
    if isinstance(error, ConfigurationError):
        if error.details.get("feature"):
            return ErrorCode.FEATURE_DISABLED
        return ErrorCode.INVALID_CONFIGURATION

    if isinstance(error, InitializationError):
        return ErrorCode.INITIALIZATION_FAILED

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    return ErrorCode.INTERNAL_ERROR
