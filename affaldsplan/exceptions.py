"""
This module defines custom exceptions for the calendar service.
"""


class RenowebIcsError(Exception):
    """Base class for all errors raised by the calendar service."""

    pass


class ClientInputError(RenowebIcsError):
    """Raised when the caller supplied missing or invalid query parameters."""

    pass


class UpstreamProtocolError(RenowebIcsError):
    """Raised when Renoweb answers with data that cannot be parsed."""

    pass


class MalformedDateError(UpstreamProtocolError):
    """Raised when a Renoweb date entry holds no recognizable date."""

    pass


class UpstreamCommunicationError(RenowebIcsError):
    """Raised on network or HTTP errors while talking to Renoweb."""

    pass


class ArtifactNotFoundError(RenowebIcsError, KeyError):
    """Raised when a cache key has no stored calendar artifact."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
