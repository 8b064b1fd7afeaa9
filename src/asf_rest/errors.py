"""
Exception types raised by the REST adapter.
"""

from typing import NoReturn, Union


class AsfRestError(Exception):
    """Base class for adapter errors."""


class AdapterNotConfiguredError(AsfRestError):
    """Raised when an operation runs before `configure()` supplied credentials."""


class SalesforceRestError(AsfRestError):
    """A non-200 answer from an endpoint that checks its status code."""

    def __init__(self, message: str, status_code: Union[int, str]):
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)


def raise_error(message: str, status_code: Union[int, str]) -> NoReturn:
    """Raise a `SalesforceRestError` carrying the HTTP status code."""
    raise SalesforceRestError(message, status_code)
