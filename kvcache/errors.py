"""
kvcache - Core Error Types

Defines the exception hierarchy for the kvcache runtime.
All exceptions inherit from KVCacheError for consistent error handling.

- ErrorCode enum for callers that report failures as data
- Distinct types for missing keys, failed operations and failed connections
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    Standard error codes for cache failures.

    Used for structured error reporting by callers that serialize errors.
    """

    # Input validation errors
    INVALID_INPUT = "INVALID_INPUT"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Cache errors
    KEY_NOT_FOUND = "KEY_NOT_FOUND"
    CACHE_FAILURE = "CACHE_FAILURE"
    CONNECTION_FAILED = "CONNECTION_FAILED"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ConnectionFailureReason(str, Enum):
    """Why a cache handle could not be constructed or verified."""

    BAD_ADDRESS = "bad_address"
    AUTH_REJECTED = "auth_rejected"
    PROBE_TIMEOUT = "probe_timeout"
    UNREACHABLE = "unreachable"
    PROBE_FAILED = "probe_failed"


class KVCacheError(Exception):
    """Base exception for all kvcache errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a plain dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(KVCacheError):
    """Raised when configuration is invalid or missing."""

    pass


class CacheError(KVCacheError):
    """Base exception for cache-related errors."""

    pass


class KeyDoesNotExistError(CacheError):
    """Raised when a key is absent from the remote store."""

    def __init__(self, key: str):
        super().__init__("key does not exist", {"key": key})
        self.key = key


class CacheOperationError(CacheError):
    """Raised when a single remote cache operation fails."""

    def __init__(self, operation: str, message: str, details: dict[str, Any] | None = None):
        error_details = details or {}
        error_details["operation"] = operation
        super().__init__(f"Cache operation '{operation}' failed: {message}", error_details)
        self.operation = operation


class CacheConnectionError(CacheError):
    """Raised when a cache handle cannot be constructed or fails its liveness probe."""

    def __init__(
        self,
        address: str,
        reason: ConnectionFailureReason,
        details: dict[str, Any] | None = None,
    ):
        message = f"Failed to connect to cache at {address}: {reason.value}"
        error_details = details or {}
        error_details.update({"address": address, "reason": reason.value})
        super().__init__(message, error_details)
        self.address = address
        self.reason = reason


def make_error_response(
    error_code: ErrorCode,
    message: str,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized error response.

    Example:
        >>> make_error_response(ErrorCode.KEY_NOT_FOUND, "key does not exist", {"key": "a"})
        {'success': False, 'error_code': 'KEY_NOT_FOUND', 'message': 'key does not exist', 'details': {'key': 'a'}}
    """
    return {
        "success": False,
        "error_code": error_code.value,
        "message": message,
        "details": context or {},
    }


def extract_error_code(error: Exception) -> ErrorCode:
    """
    Extract the appropriate ErrorCode from an exception.

    Args:
        error: Exception to categorize

    Returns:
        ErrorCode for the exception
    """
    if isinstance(error, KeyDoesNotExistError):
        return ErrorCode.KEY_NOT_FOUND

    if isinstance(error, CacheConnectionError):
        return ErrorCode.CONNECTION_FAILED

    if isinstance(error, CacheError):
        return ErrorCode.CACHE_FAILURE

    if isinstance(error, ConfigurationError):
        return ErrorCode.CONFIGURATION_ERROR

    if isinstance(error, (ValueError, TypeError)):
        return ErrorCode.INVALID_INPUT

    return ErrorCode.INTERNAL_ERROR
