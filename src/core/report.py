"""Report aggregation - Pure functions.

This module derives the statistics report shown next to the map from the
filtered event set and the loaded boundary collection. The report is
always recomputed from its inputs, never patched.

All functions are pure with no side effects.
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum

from src.core.boundaries import BoundaryKind, BoundarySegment
from src.core.earthquake import SeismicEvent


# Band thresholds
STRONG_THRESHOLD = 5.0
MODERATE_THRESHOLD = 3.0

UNKNOWN_PLACE = "Unknown"

DEFAULT_TOP_LOCATIONS = 5

NO_DATA_MESSAGE = "No earthquakes match the current filters."


class MagnitudeBand(str, Enum):
    """Severity bucket used for reporting and map styling."""
    MINOR = "minor"
    MODERATE = "moderate"
    STRONG = "strong"


class NoData:
    """Marker returned instead of a report when nothing matches the filters."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_DATA"

    @property
    def message(self) -> str:
        return NO_DATA_MESSAGE


NO_DATA = NoData()


@dataclass(frozen=True)
class AggregateReport:
    """Statistics over a non-empty filtered event set.

    Attributes:
        total: Number of events in the filtered set
        strong: Events with magnitude >= 5
        moderate: Events with 3 <= magnitude < 5
        minor: Events with magnitude < 3
        unrated: Events without a reported magnitude
        avg_magnitude: Mean magnitude rounded to 2 decimals
        max_magnitude: Largest magnitude (exact)
        min_magnitude: Smallest magnitude (exact)
        max_depth_km: Deepest event
        min_depth_km: Shallowest event
        top_locations: (place, count) pairs, most active first
        boundary_counts: Segments per boundary kind, None if boundaries
            are not loaded
    """
    total: int
    strong: int
    moderate: int
    minor: int
    unrated: int
    avg_magnitude: float | None
    max_magnitude: float | None
    min_magnitude: float | None
    max_depth_km: float
    min_depth_km: float
    top_locations: tuple[tuple[str, int], ...]
    boundary_counts: dict[BoundaryKind, int] | None = None

    @property
    def formatted_top_locations(self) -> list[str]:
        """Top locations as display strings, e.g. 'Alaska (3)'."""
        return [f"{place} ({count})" for place, count in self.top_locations]

    @property
    def formatted_avg_magnitude(self) -> str:
        if self.avg_magnitude is None:
            return "n/a"
        return f"{self.avg_magnitude:.2f}"


def classify_magnitude(magnitude: float) -> MagnitudeBand:
    """Place a magnitude in its severity band.

    Pure function.
    """
    if magnitude >= STRONG_THRESHOLD:
        return MagnitudeBand.STRONG
    elif magnitude >= MODERATE_THRESHOLD:
        return MagnitudeBand.MODERATE
    return MagnitudeBand.MINOR


def count_bands(events: list[SeismicEvent]) -> dict[MagnitudeBand, int]:
    """Count events per magnitude band, skipping unrated events.

    Pure function.
    """
    counts = {band: 0 for band in MagnitudeBand}
    for event in events:
        if event.has_magnitude:
            counts[classify_magnitude(event.magnitude)] += 1
    return counts


def rank_places(
    events: list[SeismicEvent],
    limit: int = DEFAULT_TOP_LOCATIONS,
) -> list[tuple[str, int]]:
    """Rank places by event count.

    Pure function. Places are grouped by exact string; empty places count
    as 'Unknown'. Ties keep first-occurrence order.

    Args:
        events: Filtered events
        limit: Maximum number of places to return

    Returns:
        (place, count) pairs, most active first
    """
    counts: dict[str, int] = {}
    for event in events:
        place = event.place or UNKNOWN_PLACE
        counts[place] = counts.get(place, 0) + 1

    # dicts keep insertion order and sorted() is stable
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return ranked[:limit]


def count_boundary_kinds(
    boundaries: list[BoundarySegment],
) -> dict[BoundaryKind, int]:
    """Tally every loaded segment by boundary kind.

    Pure function. Undecorated segments are not counted.
    """
    tally = Counter(s.boundary_kind for s in boundaries if s.boundary_kind is not None)
    return {kind: tally.get(kind, 0) for kind in BoundaryKind}


def summarize(
    filtered: list[SeismicEvent],
    boundaries: list[BoundarySegment] | None,
    limit: int = DEFAULT_TOP_LOCATIONS,
) -> AggregateReport | NoData:
    """Build the statistics report for the filtered events.

    Pure function.

    Args:
        filtered: Output of apply_filters
        boundaries: Full boundary collection, or None if not loaded yet
        limit: Number of top locations to keep

    Returns:
        AggregateReport, or NO_DATA when the filtered set is empty
    """
    if not filtered:
        return NO_DATA

    magnitudes = [e.magnitude for e in filtered if e.has_magnitude]
    depths = [e.depth_km for e in filtered]
    bands = count_bands(filtered)

    avg_magnitude = None
    if magnitudes:
        avg_magnitude = round(sum(magnitudes) / len(magnitudes), 2)

    return AggregateReport(
        total=len(filtered),
        strong=bands[MagnitudeBand.STRONG],
        moderate=bands[MagnitudeBand.MODERATE],
        minor=bands[MagnitudeBand.MINOR],
        unrated=len(filtered) - len(magnitudes),
        avg_magnitude=avg_magnitude,
        max_magnitude=max(magnitudes) if magnitudes else None,
        min_magnitude=min(magnitudes) if magnitudes else None,
        max_depth_km=max(depths),
        min_depth_km=min(depths),
        top_locations=tuple(rank_places(filtered, limit)),
        boundary_counts=count_boundary_kinds(boundaries) if boundaries is not None else None,
    )
