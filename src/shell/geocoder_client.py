"""Geocoder Client - Imperative Shell.

This module resolves free-text place names with the OpenStreetMap
Nominatim search API. All I/O is contained here; result parsing is in
the core module.
"""

import logging
from dataclasses import dataclass

from src.core.config import NOMINATIM_SEARCH_URL
from src.core.geocode import Coordinates, normalize_query, parse_geocode_results
from src.core.status import FailureKind
from src.shell.usgs_client import DEFAULT_TIMEOUT, get_json


logger = logging.getLogger(__name__)


@dataclass
class GeocodeResult:
    """Result of a place lookup.

    Attributes:
        success: Whether the place was resolved
        coordinates: Resolved position if successful
        failure: NOT_FOUND, NETWORK or PARSE if failed
        error: Error message if failed
        skipped: True when the query was blank and no request was made
    """
    success: bool
    coordinates: Coordinates | None = None
    failure: FailureKind | None = None
    error: str | None = None
    skipped: bool = False

    @property
    def not_found(self) -> bool:
        return self.failure is FailureKind.NOT_FOUND


class NominatimClient:
    """Client for the Nominatim place search.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        url: str = NOMINATIM_SEARCH_URL,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = "quake-atlas/1.0",
    ) -> None:
        """Initialize geocoder client.

        Args:
            url: Search endpoint
            timeout: Request timeout in seconds
            user_agent: User-Agent header (required by Nominatim's usage policy)
        """
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent

    def search(self, query: str | None) -> GeocodeResult:
        """Resolve a place name to coordinates using the first candidate.

        This method performs HTTP I/O, except for blank queries which are
        a no-op.

        Args:
            query: Free-text place name

        Returns:
            GeocodeResult with coordinates or a failure
        """
        normalized = normalize_query(query)
        if normalized is None:
            return GeocodeResult(success=False, skipped=True)

        logger.info("Geocoding '%s'", normalized)

        response = get_json(
            self.url,
            self.timeout,
            params={"format": "json", "q": normalized, "limit": "1"},
            headers={"User-Agent": self.user_agent},
        )

        if not response.success:
            return GeocodeResult(
                success=False,
                failure=response.failure,
                error=response.error,
            )

        try:
            coordinates = parse_geocode_results(response.data)
        except ValueError as e:
            logger.error("Unexpected geocoder response: %s", str(e))
            return GeocodeResult(success=False, failure=FailureKind.PARSE, error=str(e))

        if coordinates is None:
            logger.info("No geocoder results for '%s'", normalized)
            return GeocodeResult(
                success=False,
                failure=FailureKind.NOT_FOUND,
                error=f"No results for '{normalized}'",
            )

        logger.info(
            "Resolved '%s' to (%.4f, %.4f)",
            normalized,
            coordinates.latitude,
            coordinates.longitude,
        )

        return GeocodeResult(success=True, coordinates=coordinates)
