"""Custom exception classes for the application.

This module provides domain-specific exception classes that carry
an HTTP status code, a machine-readable error kind and structured
error information for callers.
"""

from __future__ import annotations

from typing import Any
from typing import Optional

# Error kinds surfaced to callers
PERMISSION_DENIED = "permission-denied"
INVALID_ARGUMENT = "invalid-argument"
INTERNAL = "internal"


class AppError(Exception):
    """Base exception for application errors.

    All application-specific exceptions should inherit from this class.
    Each exception carries an HTTP status code, an error kind and
    optional details.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        detail: Optional additional context.
        code: Machine-readable error kind (default "internal").
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
        code: str = INTERNAL,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when input validation fails.

    Use for missing required fields, wrong value types,
    or constraint violations in user input.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(
            message,
            status_code=400,
            detail=detail,
            code=INVALID_ARGUMENT,
        )
        self.field = field


class AuthorizationError(AppError):
    """Raised when the caller may not perform the operation.

    Use when no authenticated caller is present, or when the caller
    lacks the administrator group.
    """

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403, code=PERMISSION_DENIED)


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables or settings are not properly configured.
    """

    def __init__(self, config_name: str):
        super().__init__(
            f"Missing required configuration: {config_name}",
            status_code=500,
        )
        self.config_name = config_name


class DatabaseError(AppError):
    """Raised when a profile store operation fails.

    Use for connection errors, query failures, or missing records
    that an operation expected to exist.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message,
            status_code=500,
            detail=detail,
        )


class IdentityProviderError(AppError):
    """Raised when a call to the identity provider fails.

    The provider's own error code (e.g. ``UsernameExistsException``)
    is kept as the detail so callers can tell a conflict from an outage
    without seeing the provider payload.
    """

    def __init__(self, message: str, provider_code: Optional[str] = None):
        super().__init__(
            message,
            status_code=500,
            detail=provider_code,
        )
        self.provider_code = provider_code
