"""Typed failure kinds for the decision pipeline.

Every exception raised across the decision boundary carries an ``ErrorKind``
so that callers dispatch on the enumerated kind, never on message text.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    PROVIDER_ERROR = "provider_error"
    NO_PROVIDERS_AVAILABLE = "no_providers_available"
    INVALID_CONFIGURATION = "invalid_configuration"
    REQUEST_TIMEOUT = "request_timeout"


class DecisionError(Exception):
    """Base class for all decision pipeline failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProviderError(DecisionError):
    """A single scoring provider failed. Isolated, never fatal to the request."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, source_id: str, message: str) -> None:
        super().__init__(f"{source_id}: {message}")
        self.source_id = source_id


class NoProvidersAvailable(DecisionError):
    kind = ErrorKind.NO_PROVIDERS_AVAILABLE


class InvalidConfiguration(DecisionError):
    kind = ErrorKind.INVALID_CONFIGURATION


class RequestTimeout(DecisionError):
    kind = ErrorKind.REQUEST_TIMEOUT
