"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS summary feed client (HTTP)
- Plate boundaries client (HTTP)
- Nominatim geocoder client (HTTP)
- Static map rendering (tile fetching)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.usgs_client import USGSFeedClient, FeedResult
from src.shell.boundaries_client import BoundariesClient
from src.shell.geocoder_client import NominatimClient, GeocodeResult
from src.shell.static_map_client import StaticMapClient
from src.shell.config_loader import load_config

__all__ = [
    "USGSFeedClient",
    "FeedResult",
    "BoundariesClient",
    "NominatimClient",
    "GeocodeResult",
    "StaticMapClient",
    "load_config",
]
