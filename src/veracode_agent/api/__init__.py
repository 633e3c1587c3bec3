"""
Veracode API client package for the Veracode XML and REST APIs.

This package can be used as a standalone SDK for interacting with Veracode.
"""

from veracode_agent.api.exceptions import (
    ApiError,
    AuthenticationError,
    NetworkError,
    VeracodeApiError,
)
from veracode_agent.api.veracode_client import VeracodeClient

__all__ = [
    "VeracodeClient",
    # Exceptions
    "VeracodeApiError",
    "ApiError",
    "AuthenticationError",
    "NetworkError",
]
