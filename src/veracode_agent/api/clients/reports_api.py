"""
ReportsClient - Scan result reports from the XML API.
"""

import logging
from typing import Any, Dict, Union

from veracode_agent.api.helpers.forms import BuildReportForm

logger = logging.getLogger("veracode-agent")


class ReportsClient:
    """
    Reports API client using composition pattern.

    Example:
        >>> reports = ReportsClient(base_api)
        >>> summary = await reports.summary_report("4567")
        >>> summary["_attributes"]["policy_compliance_status"]
        'Pass'
    """

    def __init__(self, base_api):
        self._api = base_api
        logger.debug("ReportsClient initialized")

    async def summary_report(self, build_id: str) -> Union[Dict[str, Any], str]:
        """
        Summary report of the scan results for a build (summaryreport.do,
        API v4 only).

        Returns:
            The ``summaryreport`` node

        Raises:
            ApiError: If no report is available for the build
        """
        response = await self._api._xml_request(
            "summaryreport.do",
            form=BuildReportForm(build_id=build_id).to_form(),
            api_base=self._api.API_BASE_4,
        )
        if self._api.return_xml:
            return response
        return response.get("summaryreport")

    async def detailed_report(self, build_id: str) -> Union[Dict[str, Any], str]:
        """
        Detailed report of the scan results for a build (detailedreport.do).

        Returns:
            The ``detailedreport`` node

        Raises:
            ApiError: If no report is available for the build
        """
        response = await self._api._xml_request(
            "detailedreport.do", form=BuildReportForm(build_id=build_id).to_form()
        )
        if self._api.return_xml:
            return response
        return response.get("detailedreport")
