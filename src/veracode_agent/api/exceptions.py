"""
API-level exceptions raised by the Veracode client.

Every error reported by the transport or by the Veracode service itself
inherits from VeracodeApiError.
"""

from typing import Optional


class VeracodeApiError(Exception):
    """Base class for all Veracode API errors.

    Attributes:
        message: A human-readable error message
        code: An optional error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ApiError(VeracodeApiError):
    """Raised when the service reports a failure inside a well-formed response.

    The XML API answers request-level failures (invalid app, duplicate
    name, no report available) with HTTP 200 and an ``<error>`` element;
    the message of this exception is that element's text.
    """

    pass


class AuthenticationError(ApiError):
    """Raised when the service rejects the request signature (HTTP 401/403)."""

    pass


class NetworkError(VeracodeApiError):
    """Raised for connection failures and non-success HTTP responses."""

    pass
