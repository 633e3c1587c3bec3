# tests/unit/conftest.py

import httpx
import pytest

from veracode_agent.api.helpers.base_api import BaseAPI

MOCK_API_ID = "fake"
MOCK_API_SECRET = "0123456789abcdef0123456789abcdef"
MOCK_NONCE = bytes.fromhex("00112233445566778899aabbccddeeff")
MOCK_DATE_STAMP = "1000198760000"


def mock_now():
    return MOCK_DATE_STAMP


def mock_nonce(size):
    assert size == 16
    return MOCK_NONCE


class RecordingTransport(httpx.MockTransport):
    """
    MockTransport that serves queued responses in order and records every
    request it receives. The last queued response is repeated once the
    queue runs dry.
    """

    def __init__(self):
        super().__init__(self._handle)
        self.requests = []
        self._responses = []

    def queue(self, status_code=200, **kwargs):
        self._responses.append((status_code, kwargs))
        return self

    def queue_xml(self, text, status_code=200):
        return self.queue(status_code, text=text, headers={"Content-Type": "text/xml"})

    def queue_json(self, data, status_code=200):
        return self.queue(status_code, json=data)

    def _handle(self, request):
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, text="")
        if len(self._responses) > 1:
            status_code, kwargs = self._responses.pop(0)
        else:
            status_code, kwargs = self._responses[0]
        return httpx.Response(status_code, **kwargs)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def base_api(transport):
    """BaseAPI with a recording transport and fixed signing inputs."""
    return BaseAPI(
        MOCK_API_ID,
        MOCK_API_SECRET,
        transport=transport,
        now_provider=mock_now,
        nonce_provider=mock_nonce,
    )


@pytest.fixture
def xml_base_api(transport):
    """BaseAPI that returns raw XML text."""
    return BaseAPI(
        MOCK_API_ID,
        MOCK_API_SECRET,
        return_xml=True,
        transport=transport,
        now_provider=mock_now,
        nonce_provider=mock_nonce,
    )


@pytest.fixture
def expected_auth_header():
    """Independent computation of the Authorization header for the mock credentials."""
    import hashlib
    import hmac
    from urllib.parse import urlsplit

    def _hash(data, key):
        if isinstance(data, str):
            data = data.encode()
        return hmac.new(key, data, hashlib.sha256).digest()

    def _header(url, method):
        parts = urlsplit(str(url))
        path = parts.path + (f"?{parts.query}" if parts.query else "")
        data = f"id={MOCK_API_ID}&host={parts.hostname}&url={path}&method={method}"
        k_nonce = _hash(MOCK_NONCE, bytes.fromhex(MOCK_API_SECRET))
        k_date = _hash(MOCK_DATE_STAMP, k_nonce)
        k_sig = _hash("vcode_request_version_1", k_date)
        signature = _hash(data, k_sig)
        return (
            f"VERACODE-HMAC-SHA-256 id={MOCK_API_ID},ts={MOCK_DATE_STAMP},"
            f"nonce={MOCK_NONCE.hex()},sig={signature.hex()}"
        )

    return _header
