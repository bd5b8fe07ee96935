"""Single blocking download used by the URL entry points."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import get_settings
from .errors import FetchError

logger = logging.getLogger(__name__)


def fetch_bytes(url: str, client: Optional[httpx.Client] = None) -> bytes:
    """
    Download ``url`` and return the response body.

    A caller-supplied ``client`` is used as-is and left open; otherwise a
    short-lived client is created with the configured timeout.
    """
    if client is None:
        with httpx.Client(timeout=get_settings().fetch_timeout, follow_redirects=True) as owned:
            return _get(owned, url)
    return _get(client, url)


def _get(client: httpx.Client, url: str) -> bytes:
    try:
        response = client.get(url)
    except httpx.HTTPError as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        raise FetchError(url, str(exc)) from exc

    if response.is_error:
        logger.warning("Fetching %s returned HTTP %d", url, response.status_code)
        raise FetchError(url, response.reason_phrase or "HTTP error", status_code=response.status_code)

    logger.info("Fetched %s (%d bytes)", url, len(response.content))
    return response.content
