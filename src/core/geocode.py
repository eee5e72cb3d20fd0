"""Place search helpers - Pure functions.

Query normalization and parsing of geocoder candidates. The HTTP lookup
itself lives in the shell (src/shell/geocoder_client.py).
"""

from dataclasses import dataclass
from typing import Any


NOT_FOUND_MESSAGE = "Location not found!"


@dataclass(frozen=True)
class Coordinates:
    """A resolved map position.

    Attributes:
        latitude: WGS84 latitude
        longitude: WGS84 longitude
        display_name: Label returned by the geocoder, if any
    """
    latitude: float
    longitude: float
    display_name: str = ""


def normalize_query(query: str | None) -> str | None:
    """Trim a search query; blank queries become None.

    Pure function. A None result means no lookup should be made.
    """
    if query is None:
        return None
    stripped = query.strip()
    return stripped or None


def parse_geocode_results(data: Any) -> Coordinates | None:
    """Take the first candidate of a Nominatim-style result array.

    Pure function.

    Args:
        data: Decoded JSON response (a list of candidates)

    Returns:
        Coordinates of the first candidate, or None when there are none

    Raises:
        ValueError: If the body is not a list or the first candidate has
            no usable lat/lon
    """
    if not isinstance(data, list):
        raise ValueError("Geocoder response is not a list")

    if not data:
        return None

    first = data[0]
    try:
        return Coordinates(
            latitude=float(first["lat"]),
            longitude=float(first["lon"]),
            display_name=str(first.get("display_name", "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Geocoder candidate is malformed: {e}") from e
