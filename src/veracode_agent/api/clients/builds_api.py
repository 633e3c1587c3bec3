"""
BuildsClient - Build and prescan operations on the XML API.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from veracode_agent.api.helpers.forms import (
    BeginPrescanForm,
    BuildInfoForm,
    BuildListForm,
    CreateBuildForm,
)
from veracode_agent.api.helpers.xml_response import controlled_array

logger = logging.getLogger("veracode-agent")


class BuildsClient:
    """
    Builds API client using composition pattern.

    Handles:
    - Listing policy and sandbox builds
    - Creating builds
    - Fetching build information
    - Starting the prescan

    Example:
        >>> builds = BuildsClient(base_api)
        >>> build = await builds.create_build("123", app_version="1.4.2")
        >>> await builds.begin_prescan("123", auto_scan=True)
    """

    def __init__(self, base_api):
        """
        Initialize BuildsClient.

        Args:
            base_api: BaseAPI instance for making HTTP requests
        """
        self._api = base_api
        logger.debug("BuildsClient initialized")

    async def get_build_list(
        self, app_id: str, sandbox_id: Optional[str] = None
    ) -> Union[List[Dict[str, Any]], str]:
        """
        Lists the policy or sandbox scans of an application, in progress or
        complete (getbuildlist.do).

        Returns:
            List of ``build`` nodes
        """
        form = BuildListForm(app_id=app_id, sandbox_id=sandbox_id)
        response = await self._api._xml_request("getbuildlist.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return controlled_array(response.get("buildlist", {}).get("build"))

    async def create_build(
        self,
        app_id: str,
        app_version: Optional[str] = None,
        lifecycle_stage: Optional[str] = None,
        launch_date: Optional[str] = None,
        sandbox_id: Optional[str] = None,
        legacy_scan_engine: Optional[bool] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Creates a new build of an existing application (createbuild.do).

        Args:
            app_id: Application ID
            app_version: Build name, sent as the ``version`` field
            lifecycle_stage: Lifecycle stage label
            launch_date: Planned launch date (MM/DD/YYYY)
            sandbox_id: Create the build in this sandbox
            legacy_scan_engine: Use the legacy scan engine

        Returns:
            The ``buildinfo`` node

        Raises:
            ApiError: If the service reports an error (e.g. build in progress)
        """
        form = CreateBuildForm(
            app_id=app_id,
            app_version=app_version,
            lifecycle_stage=lifecycle_stage,
            launch_date=launch_date,
            sandbox_id=sandbox_id,
            legacy_scan_engine=legacy_scan_engine,
        )
        logger.debug(f"Creating build '{app_version}' for app {app_id}...")
        response = await self._api._xml_request("createbuild.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return response.get("buildinfo")

    async def get_build_info(
        self,
        app_id: str,
        build_id: Optional[str] = None,
        sandbox_id: Optional[str] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Information about the most recent or a specific build
        (getbuildinfo.do).

        Returns:
            The ``buildinfo`` node
        """
        form = BuildInfoForm(app_id=app_id, build_id=build_id, sandbox_id=sandbox_id)
        response = await self._api._xml_request("getbuildinfo.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return response.get("buildinfo")

    async def begin_prescan(
        self,
        app_id: str,
        auto_scan: Optional[bool] = None,
        sandbox_id: Optional[str] = None,
        scan_all_nonfatal_top_level_modules: Optional[bool] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Runs the prescan of the uploaded files (beginprescan.do).

        Args:
            app_id: Application ID
            auto_scan: Start the full scan automatically after prescan
            sandbox_id: Sandbox the build belongs to
            scan_all_nonfatal_top_level_modules: Select every top-level
                module without fatal errors

        Returns:
            The ``buildinfo`` node
        """
        form = BeginPrescanForm(
            app_id=app_id,
            auto_scan=auto_scan,
            sandbox_id=sandbox_id,
            scan_all_nonfatal_top_level_modules=scan_all_nonfatal_top_level_modules,
        )
        logger.debug(f"Starting prescan for app {app_id}...")
        response = await self._api._xml_request("beginprescan.do", form=form.to_form())
        if self._api.return_xml:
            return response
        return response.get("buildinfo")
