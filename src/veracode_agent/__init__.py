"""
Veracode Agent - Async API client for the Veracode XML and REST APIs
"""

__version__ = "0.1.0"

# Import main API client
from .api.veracode_client import VeracodeClient

__all__ = ["VeracodeClient"]
