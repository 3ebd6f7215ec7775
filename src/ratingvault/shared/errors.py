"""RatingVault Error Handling Module

This module defines the error handling system for RatingVault, providing
structured error classes with context information and a failure taxonomy
that the orchestrator translates into lookup results.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Classified Failures: Upstream errors carry a FailureReason for callers
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Keys never exported by safe_dict (the upstream access key must not leak)
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key", "apikey")


class ErrorCode(str, Enum):
    """Error codes for RatingVault.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Query / input errors
    INVALID_QUERY = "INVALID_QUERY"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Upstream (OMDb) errors
    OMDB_API_CONNECTION_ERROR = "OMDB_API_CONNECTION_ERROR"
    OMDB_API_TIMEOUT = "OMDB_API_TIMEOUT"
    OMDB_API_SERVER_ERROR = "OMDB_API_SERVER_ERROR"
    OMDB_API_RETRIES_EXHAUSTED = "OMDB_API_RETRIES_EXHAUSTED"
    OMDB_API_MEDIA_NOT_FOUND = "OMDB_API_MEDIA_NOT_FOUND"
    OMDB_API_AUTHENTICATION_ERROR = "OMDB_API_AUTHENTICATION_ERROR"
    OMDB_API_REQUEST_REJECTED = "OMDB_API_REQUEST_REJECTED"
    OMDB_API_INVALID_RESPONSE = "OMDB_API_INVALID_RESPONSE"

    # Cache errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"
    CACHE_STORAGE_DEGRADED = "CACHE_STORAGE_DEGRADED"
    INVALID_CACHE_DURATION = "INVALID_CACHE_DURATION"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_INVALID = "CONFIG_INVALID"

    # CLI errors
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"
    CLI_OUTPUT_ERROR = "CLI_OUTPUT_ERROR"

    # Application errors
    APPLICATION_ERROR = "APPLICATION_ERROR"


class FailureReason(str, Enum):
    """Classified lookup failure kinds reported to collaborators."""

    INVALID_QUERY = "InvalidQuery"
    TRANSIENT_UPSTREAM_FAILURE = "TransientUpstreamFailure"
    NOT_FOUND = "NotFound"
    INVALID_CREDENTIALS = "InvalidCredentials"
    UPSTREAM_REJECTED = "UpstreamRejected"
    INVALID_DURATION = "InvalidDuration"
    MISSING_INPUT = "MissingInput"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if val is None:
            continue
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContextModel:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization and prevent sensitive
    data leakage. ``None`` values are dropped.

    Attributes:
        operation: Optional operation name that caused the error
        cache_key: Optional cache key associated with the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    cache_key: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with sensitive keys masked.

        Args:
            mask_keys: Keys to exclude from output. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked sensitive fields and guaranteed additional_data key.

        Example:
            >>> context = ErrorContextModel(operation="fetch", additional_data={"apikey": "x"})
            >>> context.safe_dict()
            {'operation': 'fetch', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.cache_key is not None:
            data["cache_key"] = self.cache_key

        data["additional_data"] = {
            key: value
            for key, value in (self.additional_data or {}).items()
            if key not in mask_keys
        }
        return data


ErrorContext = ErrorContextModel


class RatingVaultError(Exception):
    """Base exception class for all RatingVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize RatingVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging with sensitive keys masked."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(RatingVaultError):
    """Domain-specific errors.

    These errors occur when caller input or business rules are violated.

    Examples:
    - Empty title in a lookup query
    - Non-positive cache duration
    """


class InfrastructureError(RatingVaultError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems
    like the upstream rating API or the durable cache store.
    """


class UpstreamError(RatingVaultError):
    """Mixin marking errors produced while resolving a title upstream.

    Every subclass declares the FailureReason the orchestrator reports.
    """

    reason: FailureReason = FailureReason.UPSTREAM_REJECTED


class InvalidQueryError(DomainError, UpstreamError):
    """Caller supplied an empty or missing title. Never retried."""

    reason = FailureReason.INVALID_QUERY


class NotFoundError(DomainError, UpstreamError):
    """Upstream affirmatively reports that the title does not exist."""

    reason = FailureReason.NOT_FOUND


class TransientUpstreamFailureError(InfrastructureError, UpstreamError):
    """Transport errors or non-success status after the retry budget."""

    reason = FailureReason.TRANSIENT_UPSTREAM_FAILURE


class InvalidCredentialsError(InfrastructureError, UpstreamError):
    """Upstream rejected the access key."""

    reason = FailureReason.INVALID_CREDENTIALS


class UpstreamRejectedError(InfrastructureError, UpstreamError):
    """Generic upstream-reported failure."""

    reason = FailureReason.UPSTREAM_REJECTED


class InvalidDurationError(DomainError):
    """Cache duration request with a non-positive or non-integer value."""

    reason = FailureReason.INVALID_DURATION


class StorageDegradedError(InfrastructureError):
    """Durable tier unavailable. Absorbed by the cache store, never surfaced."""


class CliError(RatingVaultError):
    """CLI-specific errors."""


def create_invalid_query_error(
    message: str,
    operation: str | None = None,
    additional_data: dict[str, Any] | None = None,
) -> InvalidQueryError:
    """Create an InvalidQueryError with standard context."""
    context = ErrorContext(operation=operation, additional_data=additional_data)
    return InvalidQueryError(ErrorCode.INVALID_QUERY, message, context)


def create_storage_error(
    message: str,
    operation: str,
    original_error: Exception | None = None,
    cache_key: str | None = None,
) -> StorageDegradedError:
    """Create a StorageDegradedError wrapping a durable-tier failure."""
    context = ErrorContext(operation=operation, cache_key=cache_key)
    return StorageDegradedError(
        ErrorCode.CACHE_STORAGE_DEGRADED,
        message,
        context,
        original_error,
    )


__all__ = [
    "CliError",
    "DomainError",
    "ErrorCode",
    "ErrorContext",
    "ErrorContextModel",
    "FailureReason",
    "InfrastructureError",
    "InvalidCredentialsError",
    "InvalidDurationError",
    "InvalidQueryError",
    "NotFoundError",
    "RatingVaultError",
    "StorageDegradedError",
    "TransientUpstreamFailureError",
    "UpstreamError",
    "UpstreamRejectedError",
    "create_invalid_query_error",
    "create_storage_error",
]
