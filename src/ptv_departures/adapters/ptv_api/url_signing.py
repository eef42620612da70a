"""Signed URL generation for the PTV timetable API.

Every request carries the developer id and an HMAC-SHA1 signature of the
path and query string, hex encoded and upper-cased.
"""

import hashlib
import hmac
from urllib.parse import urlsplit


def sign_url(api_base: str, query: str, api_id: str, api_key: str) -> str:
    """Build a signed request URL.

    Args:
        api_base: Base URL, e.g. "https://timetableapi.ptv.vic.gov.au/v3".
        query: Request path and query string relative to the base.
        api_id: Developer id.
        api_key: Shared secret used for the signature.

    Returns:
        The full URL with ``devid`` and ``signature`` query parameters.
    """
    url = f"{api_base}{query}{'&' if '?' in query else '?'}devid={api_id}"
    parts = urlsplit(url)
    message = parts.path + (f"?{parts.query}" if parts.query else "")
    signature = hmac.new(api_key.encode(), message.encode(), hashlib.sha1).hexdigest().upper()
    return f"{url}&signature={signature}"
