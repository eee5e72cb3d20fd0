"""Plate Boundaries Client - Imperative Shell.

Fetches the static plate-boundary GeoJSON document. It is requested
once per session; parsing and decoration are in the core module.
"""

import logging

from src.core.config import PLATE_BOUNDARIES_URL
from src.shell.usgs_client import DEFAULT_TIMEOUT, FeedResult, get_json


logger = logging.getLogger(__name__)


class BoundariesClient:
    """Client for the plate-boundary document.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        url: str = PLATE_BOUNDARIES_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self.timeout = timeout

    def fetch_boundaries(self) -> FeedResult:
        """Fetch the raw boundary FeatureCollection.

        This method performs HTTP I/O.

        Returns:
            FeedResult with the decoded body or a failure
        """
        logger.info("Fetching plate boundaries from %s", self.url)

        result = get_json(self.url, self.timeout)

        if result.success and isinstance(result.data, dict):
            logger.info(
                "Fetched %d boundary features",
                len(result.data.get("features") or []),
            )

        return result
