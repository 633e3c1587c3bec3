"""
BaseAPI - HTTP communication layer shared by all Veracode API clients.

Signs every request, sends it over httpx, and normalizes the two response
flavours the service uses:

- XML API (``*.do`` endpoints): parsed into the compact dict form, with
  ``<error>`` envelopes turned into ApiError.
- REST API (``/appsec/v1``): JSON collections unwrapped from the
  ``_embedded`` envelope and paged through ``_links.next``.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import urlencode, urljoin

import httpx

from veracode_agent.api.exceptions import ApiError, AuthenticationError, NetworkError
from veracode_agent.api.helpers.signing import (
    calculate_authorization_header,
    current_date_stamp,
    new_nonce,
)
from veracode_agent.api.helpers.xml_response import error_message, parse_xml
from veracode_agent.exceptions import ConfigurationError

logger = logging.getLogger("veracode-agent")


class BaseAPI:
    """
    Signed HTTP access to the Veracode XML and REST APIs.

    Domain clients receive a BaseAPI instance and call ``_xml_request`` or
    ``_rest_request``; they never talk to httpx directly.

    Example:
        >>> api = BaseAPI("my-api-id", "0123abcd")
        >>> tree = await api._xml_request("getapplist.do")
        >>> apps = await api._rest_request("applications")
    """

    API_BASE = "https://analysiscenter.veracode.com/api/5.0/"
    # Some calls (getappbuilds, summaryreport) only exist in v4
    API_BASE_4 = "https://analysiscenter.veracode.com/api/4.0/"
    API_BASE_REST = "https://api.veracode.com/appsec/v1/"

    # Final endpoint path segment -> key inside the "_embedded" envelope
    EMBEDDED_RESOURCE_KEYS = {
        "applications": "applications",
        "findings": "findings",
    }

    def __init__(
        self,
        api_id: str,
        api_secret: str,
        return_xml: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        now_provider: Callable[[], str] = current_date_stamp,
        nonce_provider: Callable[[int], bytes] = new_nonce,
    ):
        """
        Initialize BaseAPI.

        Args:
            api_id: Veracode API identifier
            api_secret: Hex-encoded Veracode API secret
            return_xml: Return raw XML text from XML endpoints instead of
                parsed dicts
            transport: Optional httpx transport (used for testing)
            now_provider: Timestamp source for request signing
            nonce_provider: Nonce source for request signing

        Raises:
            ConfigurationError: If a credential is missing or the secret is
                not hex-encoded
        """
        if not (api_id and api_secret):
            raise ConfigurationError("Both Veracode API ID and key must be defined")
        try:
            bytes.fromhex(api_secret)
        except ValueError as e:
            raise ConfigurationError(
                "Veracode API key must be a hex-encoded string"
            ) from e

        self.api_id = api_id
        self.api_secret = api_secret
        self.return_xml = return_xml
        self._transport = transport
        self._now_provider = now_provider
        self._nonce_provider = nonce_provider

    def _authorization_header(self, url: str, method: str) -> str:
        return calculate_authorization_header(
            self.api_id,
            self.api_secret,
            url,
            method,
            now_provider=self._now_provider,
            nonce_provider=self._nonce_provider,
        )

    async def _send(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        Send one signed request.

        httpx negotiates gzip/deflate and decodes the body transparently.
        No timeout is applied and nothing is retried.

        Raises:
            NetworkError: For connection failures and non-2xx responses
            AuthenticationError: When the signature is rejected (401/403)
        """
        headers = {"Authorization": self._authorization_header(url, method)}
        logger.debug(f"{method} {url}")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
                response = await client.request(
                    method, url, headers=headers, data=data, files=files
                )
        except httpx.RequestError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise NetworkError(
                f"Request to Veracode failed: {e}", details={"url": url, "error": str(e)}
            ) from e

        logger.debug(f"Response status: {response.status_code}")

        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Veracode rejected the request credentials ({response.status_code})",
                code=str(response.status_code),
                details={"url": url, "response_text": response.text[:500]},
            )
        if not response.is_success:
            logger.error(f"Veracode returned HTTP {response.status_code} for {url}")
            raise NetworkError(
                f"Veracode returned HTTP {response.status_code}",
                code=str(response.status_code),
                details={
                    "url": url,
                    "status_code": response.status_code,
                    "response_text": response.text[:500],
                },
            )
        return response

    # ===== XML API =====

    async def _xml_request(
        self,
        endpoint: str,
        form: Optional[Dict[str, str]] = None,
        files: Optional[Dict[str, Any]] = None,
        api_base: Optional[str] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Call an XML API endpoint.

        The request is a POST when a form (or file) is supplied, otherwise a
        GET. Multipart encoding is used when ``files`` is given.

        Args:
            endpoint: Endpoint name, e.g. ``getapplist.do``
            form: Form fields
            files: Multipart file fields (name -> (filename, stream))
            api_base: Base URL override (e.g. ``API_BASE_4``)

        Returns:
            The compact dict tree, or the raw XML text when ``return_xml``
            is set

        Raises:
            ApiError: If the response carries an ``<error>`` element or is
                not well-formed XML
            NetworkError: For transport failures
        """
        url = urljoin(api_base or self.API_BASE, endpoint)
        method = "POST" if form is not None or files else "GET"
        response = await self._send(method, url, data=form, files=files)
        xml_text = response.text

        if self.return_xml:
            return xml_text

        try:
            tree = parse_xml(xml_text)
        except ET.ParseError as e:
            raise ApiError(
                f"Invalid XML received from {endpoint}",
                details={"error": str(e), "response_text": xml_text[:500]},
            ) from e

        if "error" in tree:
            message = error_message(tree)
            logger.debug(f"{endpoint} returned error: {message}")
            raise ApiError(message, details={"endpoint": endpoint})

        return tree

    # ===== REST API =====

    def embedded_resource_key(self, endpoint: str) -> str:
        """Envelope key for an endpoint, looked up by its final path segment."""
        resource = endpoint.rstrip("/").split("/")[-1]
        return self.EMBEDDED_RESOURCE_KEYS.get(resource, resource)

    def _get_embedded(self, response: Dict[str, Any], resource: str) -> List[Dict[str, Any]]:
        embedded = response.get("_embedded")
        if not embedded:
            return []
        if resource not in embedded:
            logger.warning(
                f"Response envelope has no '{resource}' collection "
                f"(found: {', '.join(embedded)})"
            )
            return []
        return embedded[resource]

    async def _rest_request(
        self,
        endpoint: str,
        query: Optional[Union[str, Dict[str, Any]]] = None,
        api_base: Optional[str] = None,
        page: bool = True,
        resource: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch a REST collection, following ``next`` links.

        Pages are fetched one after another; a failure on any page
        propagates and the items gathered so far are discarded.

        Args:
            endpoint: Path relative to the REST base, e.g. ``applications``
            query: Query string or mapping for the first request
            api_base: Base URL override
            page: Follow ``_links.next``; when False only the first page is
                fetched
            resource: Key inside ``_embedded``; defaults to the
                ``EMBEDDED_RESOURCE_KEYS`` entry for the endpoint

        Returns:
            All collected items, in page order

        Raises:
            ApiError: If a page body is valid JSON but not an object
        """
        if isinstance(query, dict):
            query = urlencode(query)
        url_string = f"{endpoint}?{query}" if query else endpoint
        url: Optional[str] = urljoin(api_base or self.API_BASE_REST, url_string)
        if resource is None:
            resource = self.embedded_resource_key(endpoint)

        resources: List[Dict[str, Any]] = []
        pages = 0
        while url:
            response = await self._send("GET", url)
            parsed = response.json()
            if not isinstance(parsed, dict):
                raise ApiError(
                    f"Unexpected JSON payload received from {endpoint}",
                    details={"url": url, "payload_type": type(parsed).__name__},
                )
            pages += 1
            resources.extend(self._get_embedded(parsed, resource))

            next_link = (parsed.get("_links") or {}).get("next")
            url = next_link["href"] if page and next_link else None

        logger.debug(f"Fetched {len(resources)} {resource} across {pages} page(s)")
        return resources
