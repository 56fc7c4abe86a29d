"""Typed errors raised at the feed retrieval boundary."""

from datetime import UTC, datetime
from typing import Any


class AppError(Exception):
    """Base error carrying a type tag, optional HTTP status and timestamp."""

    error_type = "APP_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict[str, Any]:
        """Structured form for logging and API responses."""
        data: dict[str, Any] = {
            "type": self.error_type,
            "message": self.message,
            "timestamp": self.timestamp,
        }
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        return data


class NetworkError(AppError):
    """The feed host could not be reached."""

    error_type = "NETWORK_ERROR"

    def __init__(self, message: str):
        super().__init__(message)


class HTTPError(AppError):
    error_type = "HTTP_ERROR"

    def __init__(self, status_code: int, message: str):
        super().__init__(message, status_code)


class ValidationError(AppError):
    error_type = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class ParseError(AppError):
    """The feed document could not be parsed."""

    error_type = "PARSE_ERROR"

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.details:
            data["details"] = self.details
        return data


class RateLimitError(AppError):
    error_type = "RATE_LIMIT_ERROR"

    def __init__(self, message: str, retry_after: int | None = None):
        super().__init__(message, 429)
        self.retry_after = retry_after

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.retry_after is not None:
            data["retryAfter"] = self.retry_after
        return data


class ServerError(AppError):
    error_type = "SERVER_ERROR"

    def __init__(self, status_code: int, message: str):
        super().__init__(message, status_code)


def get_error_message(error: BaseException) -> str:
    """Return a user-facing message for an error.

    Args:
        error: Any exception; non-AppError values get a generic message

    Returns:
        Message suitable for showing in the UI
    """
    if isinstance(error, RateLimitError):
        if error.retry_after:
            return (
                f"{error.message}. Please try again in {error.retry_after} seconds."
            )
        return error.message
    if isinstance(error, ValidationError):
        return f"{error.field}: {error.message}" if error.field else error.message
    if isinstance(error, ParseError):
        return f"{error.message}: {error.details}" if error.details else error.message
    if isinstance(error, AppError):
        return error.message
    return "An unexpected error occurred"
