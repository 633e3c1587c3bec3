"""
Custom exceptions for the Veracode Agent library.

This module defines the application-level exception hierarchy. All
application-level exceptions inherit from VeracodeAgentError.

Note: API-level exceptions are defined in veracode_agent.api.exceptions.
"""

from typing import Optional


class VeracodeAgentError(Exception):
    """Base class for all Veracode Agent application errors.

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


class ConfigurationError(VeracodeAgentError):
    """Raised for missing or invalid client configuration.

    This includes undefined API credentials, a secret that is not
    hex-encoded, and unusable environment settings. Never retried.

    Example:
        try:
            client = VeracodeClient.from_env()
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e.message}")
    """

    pass


class FileSystemError(VeracodeAgentError):
    """Raised for errors related to local file/directory operations.

    Example:
        try:
            await create_zip_archive(path, "upload.zip")
        except FileSystemError as e:
            logger.error(f"File system error: {e.message}")
    """

    pass
