"""
Veracode HMAC request signing.

Every request to the Veracode APIs carries an ``Authorization`` header
derived from the API credentials through a chain of HMAC-SHA-256 steps
(nonce, then timestamp, then the ``vcode_request_version_1`` marker, then
the canonical request data). The chain and header layout come from the
``veracode-api-signing`` package; this module supplies the canonical request
string and the timestamp and nonce sources.

The header embeds a millisecond timestamp and a fresh 16-byte nonce, so it
must be recomputed for every request.

Example:
    >>> header = calculate_authorization_header(
    ...     "my-api-id", "0123abcd", "https://api.veracode.com/appsec/v1/applications", "GET"
    ... )
    >>> header.startswith("VERACODE-HMAC-SHA-256 id=my-api-id,")
    True
"""

import secrets
import time
from typing import Callable
from urllib.parse import urlsplit

from veracode_api_signing.formatters import format_veracode_hmac_header
from veracode_api_signing.veracode_hmac_auth import create_signature

AUTH_SCHEME = "VERACODE-HMAC-SHA-256"
NONCE_SIZE = 16


def current_date_stamp() -> str:
    """Milliseconds since the epoch, as a decimal string."""
    return str(int(time.time() * 1000))


def new_nonce(size: int = NONCE_SIZE) -> bytes:
    return secrets.token_bytes(size)


def calculate_data_signature(
    api_secret: str, nonce: bytes, date_stamp: str, data: str
) -> str:
    """
    Run the HMAC chain and return the signature.

    Args:
        api_secret: Hex-encoded API secret
        nonce: Random bytes for this request
        date_stamp: Millisecond timestamp string
        data: Canonical request string

    Returns:
        The hex-encoded 32-byte signature
    """
    return create_signature(AUTH_SCHEME, api_secret, data, date_stamp, nonce.hex())


def canonical_request_data(api_id: str, url: str, http_method: str) -> str:
    """Build the ``id=&host=&url=&method=`` string that gets signed."""
    parts = urlsplit(str(url))
    request_path = parts.path
    if parts.query:
        request_path = f"{request_path}?{parts.query}"
    return f"id={api_id}&host={parts.hostname}&url={request_path}&method={http_method.upper()}"


def calculate_authorization_header(
    api_id: str,
    api_secret: str,
    url: str,
    http_method: str,
    now_provider: Callable[[], str] = current_date_stamp,
    nonce_provider: Callable[[int], bytes] = new_nonce,
) -> str:
    """
    Compute the Veracode ``Authorization`` header for one request.

    The time and nonce sources are injectable so the header is reproducible
    in tests; production callers use the defaults (system clock and CSPRNG).

    Args:
        api_id: Veracode API identifier
        api_secret: Hex-encoded Veracode API secret
        url: Absolute request URL, including any query string
        http_method: HTTP method the request will be sent with
        now_provider: Returns the millisecond timestamp string
        nonce_provider: Returns ``size`` random bytes

    Returns:
        ``VERACODE-HMAC-SHA-256 id=<id>,ts=<ts>,nonce=<hex>,sig=<hex>``
    """
    data = canonical_request_data(api_id, url, http_method)
    date_stamp = now_provider()
    nonce = nonce_provider(NONCE_SIZE)
    signature = calculate_data_signature(api_secret, nonce, date_stamp, data)
    return format_veracode_hmac_header(
        AUTH_SCHEME, api_id, date_stamp, nonce.hex(), signature
    )
