"""
FindingsClient - Per-application findings from the REST API.
"""

import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger("veracode-agent")


class FindingsClient:
    """
    Findings API client using composition pattern.

    Example:
        >>> findings = FindingsClient(base_api)
        >>> recent = await findings.get_findings(app_guid, modified_after="2024-01-31")
    """

    def __init__(self, base_api):
        self._api = base_api
        logger.debug("FindingsClient initialized")

    async def get_findings(
        self,
        application_guid: str,
        modified_after: Optional[str] = None,
        page: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Retrieves the findings of one application.

        Args:
            application_guid: Application GUID (not the numeric XML app_id)
            modified_after: Only findings modified after this date (YYYY-MM-DD)
            page: Follow pagination links; False returns only the first page

        Returns:
            List of finding objects

        Raises:
            NetworkError: If there are network issues
        """
        query = f"modified_after={modified_after}" if modified_after else None
        logger.debug(f"Fetching findings for application {application_guid}...")
        return await self._api._rest_request(
            f"applications/{application_guid}/findings",
            query=query,
            page=page,
            resource="findings",
        )
