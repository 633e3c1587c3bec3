"""
API Clients - Domain-specific API operation handlers.

Each client handles operations for a specific domain (applications, builds,
reports, etc.).
"""

from .applications_api import ApplicationsClient
from .builds_api import BuildsClient
from .findings_api import FindingsClient
from .reports_api import ReportsClient
from .sandboxes_api import SandboxesClient
from .upload_api import UploadsClient

__all__ = [
    "ApplicationsClient",
    "BuildsClient",
    "FindingsClient",
    "ReportsClient",
    "SandboxesClient",
    "UploadsClient",
]
