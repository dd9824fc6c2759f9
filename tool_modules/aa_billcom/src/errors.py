"""Bill.com error types.

Every failure raised by the session layer and the three API clients derives
from BillcomError and carries a single human-readable message. Tool functions
catch BillcomError and render ``str(exc)`` verbatim.
"""

from typing import Any


class BillcomError(Exception):
    """Base class for all Bill.com client failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(BillcomError):
    """Required credential or token is missing or invalid."""


class TransportError(BillcomError):
    """The remote host could not be reached or did not answer in time."""

    def __init__(self, message: str, timed_out: bool = False):
        self.timed_out = timed_out
        super().__init__(message)


class BillcomHTTPError(BillcomError):
    """Non-2xx HTTP response. Status and raw body are kept for callers."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class EnvelopeError(BillcomError):
    """Transport succeeded but the response envelope signalled failure."""

    def __init__(self, message: str, code: str | None = None, details: Any = None):
        self.code = code
        self.details = details
        super().__init__(message)


class LoginError(EnvelopeError):
    """Login did not produce a session: a failure envelope or a logout mid-login."""


class ParseError(BillcomError):
    """Response body was not valid JSON where JSON was expected."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)
