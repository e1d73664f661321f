"""
Exceptions raised by the API clients and configuration layer.

The grouping and formatting code never raises for missing data; these
errors only cover talking to the external services.
"""

from __future__ import annotations

from typing import Optional


class BadgerBaseError(Exception):
    """Base class for all BadgerBase errors."""


class ConfigError(BadgerBaseError):
    """A required setting (URL, secret) is missing."""


class AuthError(BadgerBaseError):
    """No access token / email: the user has to log in first."""


class ApiError(BadgerBaseError):
    """
    An external service answered with an error or could not be reached.

    `status` is the HTTP status code, or None for network failures.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"
