"""
Shared exception definitions.
"""

from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            message: Human-readable error message.
            code: Machine-readable error code.
            status_code: HTTP status the API layer reports.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class NotFoundError(AppException):
    """Resource not found error."""

    def __init__(self, message: str = "Resource not found", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code="NOT_FOUND", status_code=404, details=details)


class ValidationError(AppException):
    """Raised when a request is rejected (distinct from pydantic ValidationError)."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(message=message, code=code, status_code=400, details=details)


class ImportDecodeError(ValidationError):
    """Raised when an uploaded file cannot be decoded into contacts.

    Nothing from the file is persisted when this is raised.
    """

    def __init__(self, message: str = "Failed to decode import file", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, details=details, code="DECODE_ERROR")


class ExportError(AppException):
    """Raised when contacts cannot be serialized for export."""

    def __init__(self, message: str = "Failed to export contacts", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code="EXPORT_ERROR", status_code=500, details=details)


class AuthorizationError(AppException):
    """Authorization error."""

    def __init__(self, message: str = "Access denied", details: dict[str, Any] | None = None) -> None:
        super().__init__(message=message, code="AUTHORIZATION_ERROR", status_code=403, details=details)


class AuthenticationError(AppException):
    """Authentication error."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTHENTICATION_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message=message, code=code, status_code=401, details=details)


class TokenExpiredError(AuthenticationError):
    """Raised when a token has expired."""

    def __init__(self, message: str = "Token has expired", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "TOKEN_EXPIRED", details)


class InvalidTokenError(AuthenticationError):
    """Raised when a token is invalid."""

    def __init__(self, message: str = "Invalid token", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, "INVALID_TOKEN", details)
