"""
UploadsClient - Handles file uploads to the Veracode XML API.

This client sends a local file as a multipart ``uploadfile.do`` request.
Preparing the file (zipping a source tree) is handled by
veracode_agent.utilities.prep_upload_archive.

Example:
        >>> uploads = UploadsClient(base_api)
        >>> await uploads.upload_file("123", "/path/to/app.zip")
"""

import logging
import os
from typing import Any, Dict, Optional, Union

from veracode_agent.api.helpers.forms import UploadFileForm
from veracode_agent.exceptions import FileSystemError

logger = logging.getLogger("veracode-agent")


class UploadsClient:
    """
    Uploads API client using composition pattern.

    The file field carries a readable byte stream opened from the given
    path; the stream stays open only for the duration of the request.

    Example:
        >>> uploads = UploadsClient(base_api)
        >>> file_list = await uploads.upload_file(
        ...     "123", "/path/to/app.zip", sandbox_id="456", save_as="app.zip"
        ... )
    """

    def __init__(self, base_api):
        """
        Initialize UploadsClient.

        Args:
            base_api: BaseAPI instance for HTTP requests
        """
        self._api = base_api
        logger.debug("UploadsClient initialized")

    async def upload_file(
        self,
        app_id: str,
        file: str,
        sandbox_id: Optional[str] = None,
        save_as: Optional[str] = None,
    ) -> Union[Dict[str, Any], str]:
        """
        Uploads a file to an application, creating a build if none exists
        (uploadfile.do).

        Args:
            app_id: Application ID
            file: Path to the file to upload
            sandbox_id: Upload into this sandbox
            save_as: File name to store the upload under

        Returns:
            The ``filelist`` node

        Raises:
            FileSystemError: If the file doesn't exist
            ApiError: If the service reports an error
            NetworkError: If there are network issues
        """
        if not os.path.isfile(file):
            raise FileSystemError(f"File not found: {file}")

        filename = os.path.basename(file)
        file_size = os.path.getsize(file)
        logger.debug(
            f"Starting upload for file: {filename} ({file_size / (1024 * 1024):.2f} MB)"
        )

        form = UploadFileForm(app_id=app_id, sandbox_id=sandbox_id, save_as=save_as)
        with open(file, "rb") as stream:
            response = await self._api._xml_request(
                "uploadfile.do",
                form=form.to_form(),
                files={"file": (filename, stream)},
            )

        logger.info(f"Upload complete for {filename}")
        if self._api.return_xml:
            return response
        return response.get("filelist")
