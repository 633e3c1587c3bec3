"""
SandboxesClient - Sandbox operations on the XML API.
"""

import logging
from typing import Any, Dict, List, Union

from veracode_agent.api.helpers.forms import CreateSandboxForm, SandboxListForm
from veracode_agent.api.helpers.xml_response import controlled_array

logger = logging.getLogger("veracode-agent")


class SandboxesClient:
    """
    Sandboxes API client using composition pattern.

    Example:
        >>> sandboxes = SandboxesClient(base_api)
        >>> sandbox_list = await sandboxes.get_sandbox_list("123")
    """

    def __init__(self, base_api):
        self._api = base_api
        logger.debug("SandboxesClient initialized")

    async def get_sandbox_list(self, app_id: str) -> Union[List[Dict[str, Any]], str]:
        """
        Returns all sandboxes of an application (getsandboxlist.do).

        Returns:
            List of ``sandbox`` nodes
        """
        response = await self._api._xml_request(
            "getsandboxlist.do", form=SandboxListForm(app_id=app_id).to_form()
        )
        if self._api.return_xml:
            return response
        return controlled_array(response.get("sandboxlist", {}).get("sandbox"))

    async def create_sandbox(self, app_id: str, sandbox_name: str) -> Union[Dict[str, Any], str]:
        """
        Creates a sandbox for an application (createsandbox.do).

        Returns:
            The ``sandboxinfo`` node

        Raises:
            ApiError: If the service reports an error (e.g. duplicate name)
        """
        logger.debug(f"Creating sandbox '{sandbox_name}' for app {app_id}...")
        form = CreateSandboxForm(app_id=app_id, sandbox_name=sandbox_name)
        response = await self._api._xml_request("createsandbox.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return response.get("sandboxinfo")
