"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS earthquake summary
feeds. All I/O is contained here; parsing is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from src.core.config import USGS_FEED_BASE
from src.core.filters import TimeWindow
from src.core.status import FailureKind


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


@dataclass
class FeedResult:
    """Result of fetching a GeoJSON document.

    Attributes:
        success: Whether a JSON body was received
        data: Decoded JSON body if successful
        status_code: HTTP status code (0 if no response)
        failure: Failure category if failed
        error: Error message if failed
    """
    success: bool
    data: Any = None
    status_code: int = 0
    failure: FailureKind | None = None
    error: str | None = None


def get_json(
    url: str,
    timeout: int,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> FeedResult:
    """GET a URL and decode its JSON body without raising.

    Transport errors and non-2xx statuses are reported as NETWORK
    failures, undecodable bodies as PARSE failures.
    """
    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout:
        logger.error("Request to %s timed out", url)
        return FeedResult(success=False, failure=FailureKind.NETWORK, error="Request timed out")
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else 0
        logger.error("Request to %s returned %d", url, status)
        return FeedResult(
            success=False,
            status_code=status,
            failure=FailureKind.NETWORK,
            error=f"HTTP {status}",
        )
    except requests.RequestException as e:
        logger.error("Request to %s failed: %s", url, str(e))
        return FeedResult(success=False, failure=FailureKind.NETWORK, error=str(e))

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Response from %s is not valid JSON: %s", url, str(e))
        return FeedResult(
            success=False,
            status_code=response.status_code,
            failure=FailureKind.PARSE,
            error=f"Invalid JSON: {e}",
        )

    return FeedResult(success=True, data=data, status_code=response.status_code)


class USGSFeedClient:
    """Client for fetching the USGS summary feeds.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = USGS_FEED_BASE,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str | None = None,
    ) -> None:
        """Initialize USGS client.

        Args:
            base_url: Summary feed base URL
            timeout: Request timeout in seconds
            user_agent: Optional User-Agent header
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def feed_url(self, window: TimeWindow) -> str:
        """URL of the summary feed for a time window."""
        return f"{self.base_url}/{window.token}.geojson"

    def fetch_feed(self, window: TimeWindow) -> FeedResult:
        """Fetch the raw GeoJSON feed for a time window.

        This method performs HTTP I/O. One request per call, no caching.

        Args:
            window: Time window selecting the feed

        Returns:
            FeedResult with the decoded body or a failure
        """
        url = self.feed_url(window)
        headers = {"User-Agent": self.user_agent} if self.user_agent else None

        logger.info("Fetching %s feed from USGS", window.token)

        result = get_json(url, self.timeout, headers=headers)

        if result.success:
            count = 0
            if isinstance(result.data, dict):
                count = (result.data.get("metadata") or {}).get("count", 0)
            logger.info("Fetched %d earthquakes from USGS", count)

        return result
