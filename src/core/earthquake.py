"""Seismic event models and parsing - Pure functions.

This module handles parsing USGS summary-feed GeoJSON into typed
SeismicEvent objects. All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class SeismicEvent:
    """Immutable earthquake event.

    Attributes:
        id: Unique USGS event ID
        place: Human-readable location description (may be empty)
        magnitude: Reported magnitude, None when the feed reports null
        depth_km: Depth in kilometers (negative is above the reference level)
        longitude: Epicenter longitude
        latitude: Epicenter latitude
        occurred_at_ms: Event time as epoch milliseconds
        url: USGS event page URL
    """
    id: str
    place: str
    magnitude: float | None
    depth_km: float
    longitude: float
    latitude: float
    occurred_at_ms: int
    url: str = ""

    @property
    def time(self) -> datetime:
        """Event time as a UTC datetime."""
        return datetime.fromtimestamp(self.occurred_at_ms / 1000, tz=timezone.utc)

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)

    @property
    def has_magnitude(self) -> bool:
        return self.magnitude is not None


def parse_event(feature: dict[str, Any]) -> SeismicEvent | None:
    """Parse a single GeoJSON feature into a SeismicEvent.

    Pure function: takes raw dict, returns typed SeismicEvent or None if invalid.
    A null magnitude is kept as None rather than rejecting the feature.

    Args:
        feature: GeoJSON feature dict from the USGS summary feed

    Returns:
        SeismicEvent or None if parsing fails
    """
    try:
        props = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        coords = geometry.get("coordinates") or []

        if len(coords) < 3:
            return None

        # USGS uses milliseconds since epoch
        time_ms = props.get("time")
        if time_ms is None:
            return None

        magnitude = props.get("mag")

        return SeismicEvent(
            id=str(feature.get("id", "")),
            place=props.get("place") or "",
            magnitude=float(magnitude) if magnitude is not None else None,
            depth_km=float(coords[2]),
            longitude=float(coords[0]),
            latitude=float(coords[1]),
            occurred_at_ms=int(time_ms),
            url=props.get("url") or "",
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        return None


def parse_events(geojson: Any) -> list[SeismicEvent]:
    """Parse a USGS FeatureCollection into a list of SeismicEvents.

    Pure function: skips invalid features and keeps feed order (the
    summary feeds are already newest first).

    Args:
        geojson: Decoded GeoJSON response body

    Returns:
        List of valid SeismicEvent objects

    Raises:
        ValueError: If the body is not a feature collection
    """
    if not isinstance(geojson, dict):
        raise ValueError("Feed body is not a JSON object")

    features = geojson.get("features")
    if not isinstance(features, list):
        raise ValueError("Feed body has no 'features' list")

    events = []
    for feature in features:
        if not isinstance(feature, dict):
            continue
        event = parse_event(feature)
        if event is not None:
            events.append(event)

    return events


def event_to_dict(event: SeismicEvent) -> dict[str, Any]:
    """Convert a SeismicEvent to a JSON-serializable dict."""
    return {
        "id": event.id,
        "place": event.place,
        "magnitude": event.magnitude,
        "depth_km": event.depth_km,
        "latitude": event.latitude,
        "longitude": event.longitude,
        "time": event.time.isoformat(),
        "occurred_at_ms": event.occurred_at_ms,
        "url": event.url,
    }
