"""
VeracodeClient - Main API client using composition pattern.

This is the primary API client for driving Veracode through its legacy XML
API and its REST API. It organizes functionality into domain-specific
clients that share one signed HTTP layer.

Usage:
    >>> from veracode_agent.api.veracode_client import VeracodeClient
    >>>
    >>> veracode = VeracodeClient(api_id="my-api-id", api_secret="0123abcd")
    >>>
    >>> apps = await veracode.applications.list_applications()
    >>> sandboxes = await veracode.sandboxes.get_sandbox_list("123")
    >>> size = await veracode.create_zip_archive("./src", "upload.zip", ["**/*.pyc"])
    >>> await veracode.uploads.upload_file("123", "upload.zip")
    >>> await veracode.builds.begin_prescan("123", auto_scan=True)
"""

import logging
import os
from typing import Iterable, Optional

import httpx

from veracode_agent.api.clients import (
    ApplicationsClient,
    BuildsClient,
    FindingsClient,
    ReportsClient,
    SandboxesClient,
    UploadsClient,
)
from veracode_agent.api.helpers.base_api import BaseAPI
from veracode_agent.exceptions import ConfigurationError
from veracode_agent.utilities.prep_upload_archive import create_zip_archive

logger = logging.getLogger("veracode-agent")

ENV_API_ID = "VERACODE_API_KEY_ID"
ENV_API_SECRET = "VERACODE_API_KEY_SECRET"
ENV_RETURN_XML = "VERACODE_RETURN_XML"


class VeracodeClient:
    """
    Main Veracode API client providing access to Veracode functionality
    through domain-specific clients:

    - `applications`: Application portfolio (REST list, XML list/builds/create/delete)
    - `sandboxes`: Sandbox list and creation
    - `builds`: Build list, creation, info and prescan
    - `reports`: Summary and detailed reports
    - `uploads`: File uploads
    - `findings`: Per-application findings (REST)

    Every call is a coroutine. Each request is signed with a fresh
    timestamp and nonce, so one client can serve concurrent tasks.

    Example:
        >>> veracode = VeracodeClient(api_id, api_secret)
        >>> builds = await veracode.builds.get_build_list("123")
        >>> report = await veracode.reports.detailed_report(builds[-1]["_attributes"]["build_id"])
    """

    def __init__(
        self,
        api_id: str,
        api_secret: str,
        return_xml: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize VeracodeClient.

        Args:
            api_id: Veracode API identifier
            api_secret: Hex-encoded Veracode API secret
            return_xml: Return the raw XML text from XML endpoints instead of
                parsed dicts
            transport: Optional httpx transport (used for testing)

        Raises:
            ConfigurationError: If either credential is missing or the
                secret is not hex-encoded
        """
        logger.info("Initializing VeracodeClient")

        # Core infrastructure - BaseAPI handles all HTTP communication
        self._base_api = BaseAPI(api_id, api_secret, return_xml=return_xml, transport=transport)

        self.applications = ApplicationsClient(self._base_api)
        self.sandboxes = SandboxesClient(self._base_api)
        self.builds = BuildsClient(self._base_api)
        self.reports = ReportsClient(self._base_api)
        self.uploads = UploadsClient(self._base_api)
        self.findings = FindingsClient(self._base_api)

        logger.debug("API clients initialized successfully")

    @classmethod
    def from_env(cls, environ: Optional[dict] = None, **kwargs) -> "VeracodeClient":
        """
        Build a client from environment variables.

        Reads ``VERACODE_API_KEY_ID``, ``VERACODE_API_KEY_SECRET`` and the
        optional ``VERACODE_RETURN_XML`` (1/true/yes).

        Args:
            environ: Mapping to read instead of ``os.environ``
            **kwargs: Passed through to the constructor

        Raises:
            ConfigurationError: If a credential variable is missing
        """
        environ = os.environ if environ is None else environ
        api_id = environ.get(ENV_API_ID)
        api_secret = environ.get(ENV_API_SECRET)
        if not (api_id and api_secret):
            raise ConfigurationError(
                f"Both {ENV_API_ID} and {ENV_API_SECRET} must be defined",
                details={"missing": [k for k in (ENV_API_ID, ENV_API_SECRET) if not environ.get(k)]},
            )
        kwargs.setdefault(
            "return_xml", environ.get(ENV_RETURN_XML, "").lower() in ("1", "true", "yes")
        )
        return cls(api_id, api_secret, **kwargs)

    # ===== PUBLIC PROPERTIES =====

    @property
    def api_id(self) -> str:
        return self._base_api.api_id

    @property
    def return_xml(self) -> bool:
        return self._base_api.return_xml

    # ===== CONVENIENCE METHODS =====

    async def create_zip_archive(
        self, directory: str, zip_name: str, ignore: Optional[Iterable[str]] = None
    ) -> int:
        """
        Zip a directory for upload, skipping glob patterns in ``ignore``.

        Returns:
            Size of the archive in bytes
        """
        return await create_zip_archive(directory, zip_name, ignore)

    def __repr__(self) -> str:
        return f"<VeracodeClient(api_id={self._base_api.api_id})>"
