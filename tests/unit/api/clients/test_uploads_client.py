# tests/unit/api/clients/test_uploads_client.py

import pytest

from veracode_agent.api.clients.upload_api import UploadsClient
from veracode_agent.api.helpers.base_api import BaseAPI
from veracode_agent.exceptions import FileSystemError


@pytest.fixture
def uploads_client(base_api):
    return UploadsClient(base_api)


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "my_lil_file.zip"
    path.write_bytes(b"PK\x03\x04 fake zip payload")
    return path


@pytest.mark.asyncio
async def test_upload_file_with_all_options(uploads_client, transport, archive):
    transport.queue_xml('<filelist app_id="123"><file file_name="my_lil_file"/></filelist>')

    file_list = await uploads_client.upload_file(
        "123", str(archive), sandbox_id="456", save_as="my_lil_file"
    )

    assert file_list["file"]["_attributes"]["file_name"] == "my_lil_file"
    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == BaseAPI.API_BASE + "uploadfile.do"
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.content
    assert b'name="app_id"\r\n\r\n123' in body
    assert b'name="sandbox_id"\r\n\r\n456' in body
    assert b'name="save_as"\r\n\r\nmy_lil_file' in body
    assert b'name="file"; filename="my_lil_file.zip"' in body
    assert b"fake zip payload" in body


@pytest.mark.asyncio
async def test_upload_file_omits_unset_options(uploads_client, transport, archive):
    transport.queue_xml("<filelist/>")

    await uploads_client.upload_file("123", str(archive))

    body = transport.requests[0].content
    assert b'name="sandbox_id"' not in body
    assert b'name="save_as"' not in body


@pytest.mark.asyncio
async def test_upload_file_missing(uploads_client, transport, tmp_path):
    with pytest.raises(FileSystemError, match="File not found"):
        await uploads_client.upload_file("123", str(tmp_path / "missing.zip"))
    assert transport.requests == []
