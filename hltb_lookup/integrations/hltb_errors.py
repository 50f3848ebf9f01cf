"""Exception hierarchy for the HLTB client.

Every component raises a subclass of HLTBError so callers can degrade
to "not found" with a single except clause.
"""

from __future__ import annotations

__all__ = [
    "AuthFailure",
    "HLTBError",
    "NotFound",
    "SchemaViolation",
    "TransportFailure",
]


class HLTBError(Exception):
    """Base class for all HLTB client failures."""


class TransportFailure(HLTBError):
    """Raised on network errors, timeouts and non-200 responses.

    Attributes:
        status: HTTP status code, or None when no response was received.
    """

    def __init__(self, message: str, status: int | None = None):
        """Initializes the exception.

        Args:
            message: Human readable description.
            status: HTTP status code, if a response was received.
        """
        self.status = status
        super().__init__(message)


class SchemaViolation(HLTBError):
    """Raised when a decoded response is missing or mistypes a required field."""


class NotFound(HLTBError):
    """Raised when a required value (e.g. the build id) cannot be discovered."""


class AuthFailure(HLTBError):
    """Raised when no auth token could be obtained."""
