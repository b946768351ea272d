"""Exception hierarchy used throughout the package."""

from __future__ import annotations


class AppError(Exception):
    """Base class for every error raised by the package."""

    label = "Application error"

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(detail)

    def __str__(self) -> str:
        return f"{self.label}: {self.detail}"


class DatabaseError(AppError):
    """A database query, connection or pool operation failed."""

    label = "Database error"


class ApiError(AppError):
    """An HTTP request to a remote API failed."""

    label = "API request failed"


class EnvVarError(AppError):
    """A required environment variable is missing."""

    label = "Environment variable missing"


class InvalidDataError(AppError):
    """Data could not be parsed or has an unexpected shape."""

    label = "Invalid data"