"""Utility for logging API requests when PTV_LOG_REQUESTS is enabled."""

import logging
import os
import re

logger = logging.getLogger(__name__)

_SENSITIVE_PARAMS = re.compile(r"(?P<key>devid|signature)=[^&]*", re.IGNORECASE)


def should_log_requests() -> bool:
    """Check if request logging is enabled via PTV_LOG_REQUESTS environment variable."""
    return os.getenv("PTV_LOG_REQUESTS", "").lower() == "true"


def redact_url(url: str) -> str:
    """Redact the developer id and signature from a signed URL."""
    return _SENSITIVE_PARAMS.sub(lambda m: f"{m.group('key')}=***REDACTED***", url)


def log_api_request(method: str, url: str) -> None:
    """Log API request details if PTV_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Signed request URL; credentials are redacted before logging.
    """
    if not should_log_requests():
        return

    logger.info(f"API Request: {method} {redact_url(url)}")
