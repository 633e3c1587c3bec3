"""
ApplicationsClient - Application portfolio operations.

Covers both API flavours:
- REST: paged application collection
- XML: app list, app builds, create and delete
"""

import logging
from typing import Any, Dict, List, Optional, Union

from veracode_agent.api.helpers.forms import AppBuildsForm, CreateAppForm, DeleteAppForm
from veracode_agent.api.helpers.xml_response import controlled_array

logger = logging.getLogger("veracode-agent")


class ApplicationsClient:
    """
    Applications API client using composition pattern.

    Example:
        >>> applications = ApplicationsClient(base_api)
        >>> apps = await applications.list_applications()
        >>> app_info = await applications.create_app("MyApp", "High")
    """

    def __init__(self, base_api):
        """
        Initialize ApplicationsClient.

        Args:
            base_api: BaseAPI instance for making HTTP requests
        """
        self._api = base_api
        logger.debug("ApplicationsClient initialized")

    async def list_applications(self, page: bool = True) -> List[Dict[str, Any]]:
        """
        Retrieves the application collection from the REST API.

        Args:
            page: Follow pagination links; False returns only the first page

        Returns:
            List of application objects

        Raises:
            NetworkError: If there are network issues
        """
        logger.debug("Listing applications (REST)...")
        return await self._api._rest_request("applications", page=page)

    async def get_app_list(self) -> Union[List[Dict[str, Any]], str]:
        """
        Compiles a list of the applications in the portfolio (getapplist.do).

        Returns:
            List of ``app`` nodes

        Raises:
            ApiError: If the service reports an error
            NetworkError: If there are network issues
        """
        response = await self._api._xml_request("getapplist.do")
        if self._api.return_xml:
            return response
        return controlled_array(response.get("applist", {}).get("app"))

    async def get_app_builds(
        self,
        report_changed_since: Optional[str] = None,
        only_latest: Optional[bool] = None,
        include_in_progress: Optional[bool] = None,
    ) -> Union[List[Dict[str, Any]], str]:
        """
        Detailed list of applications with their build statuses
        (getappbuilds.do, API v4 only). Sandboxes are not included.

        Args:
            report_changed_since: Only builds whose report changed after
                this date (MM/DD/YYYY)
            only_latest: Only the latest build of each application
            include_in_progress: Include builds still in progress

        Returns:
            List of ``application`` nodes
        """
        form = AppBuildsForm(
            report_changed_since=report_changed_since,
            only_latest=only_latest,
            include_in_progress=include_in_progress,
        )
        response = await self._api._xml_request(
            "getappbuilds.do", form=form.to_form(), api_base=self._api.API_BASE_4
        )
        if self._api.return_xml:
            return response
        return controlled_array(response.get("applicationbuilds", {}).get("application"))

    async def create_app(
        self, app_name: str, business_criticality: str, **options: Any
    ) -> Union[Dict[str, Any], str]:
        """
        Creates a new application in the portfolio (createapp.do).

        Args:
            app_name: Application name
            business_criticality: Very High, High, Medium, Low or Very Low
            **options: Any other CreateAppForm field (description, policy,
                business_unit, teams, tags, ...)

        Returns:
            The ``appinfo`` node

        Raises:
            TypeError: If an unknown option is given
            ApiError: If the service reports an error (e.g. duplicate name)
        """
        form = CreateAppForm(
            app_name=app_name, business_criticality=business_criticality, **options
        )
        logger.debug(f"Creating application '{app_name}'...")
        response = await self._api._xml_request("createapp.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return response.get("appinfo")

    async def delete_app(self, app_id: str) -> Union[List[Dict[str, Any]], str]:
        """
        Deletes an existing application (deleteapp.do).

        Returns:
            The remaining ``app`` nodes of the portfolio
        """
        logger.debug(f"Deleting application {app_id}...")
        response = await self._api._xml_request(
            "deleteapp.do", form=DeleteAppForm(app_id=app_id).to_form()
        )
        if self._api.return_xml:
            return response
        return controlled_array(response.get("applist", {}).get("app"))
