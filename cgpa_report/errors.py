"""
Errors raised while decoding an academic data payload.

Every kind subclasses ValueError, like the rest of the calculator's input
checks, and shares one user-facing message. Callers that need to tell the
stages apart (tests, logs) catch the specific subclass.
"""

from .config import MALFORMED_DATA_MESSAGE


class PayloadError(ValueError):
    user_message = MALFORMED_DATA_MESSAGE


class TransportError(PayloadError):
    """base64 or gzip decoding failed."""


class ParseError(PayloadError):
    """No parsing strategy produced a single record."""


class NoValidCoursesError(PayloadError):
    """Records were parsed, but none of them is a usable course."""


class FormatError(PayloadError):
    """A semester label is not of the form "Mon-Year"."""
