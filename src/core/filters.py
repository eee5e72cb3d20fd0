"""Event filtering - Pure functions.

This module applies the user's filter criteria to the current event
collection. All functions are pure with no side effects.

The time window is deliberately not a client-side filter: changing it
selects a different remote feed and triggers a re-fetch. Magnitude,
depth and place keyword are applied here, in memory.
"""

from dataclasses import dataclass, replace
from enum import Enum

from src.core.earthquake import SeismicEvent


# Slider limits
MAGNITUDE_LIMITS = (0.0, 10.0)
DEPTH_LIMITS_KM = (0.0, 700.0)


class TimeWindow(str, Enum):
    """Remote feed scope, keyed by the USGS summary feed token."""
    LAST_HOUR = "all_hour"
    LAST_DAY = "all_day"
    LAST_WEEK = "all_week"
    LAST_MONTH = "all_month"

    @property
    def token(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _WINDOW_LABELS[self]

    @classmethod
    def from_token(cls, token: str) -> "TimeWindow":
        """Look up a window by its feed token.

        Raises:
            ValueError: If the token is not a known window
        """
        try:
            return cls(token)
        except ValueError:
            valid = ", ".join(w.value for w in cls)
            raise ValueError(f"Unknown time window '{token}' (expected one of: {valid})") from None


_WINDOW_LABELS = {
    TimeWindow.LAST_HOUR: "Last Hour",
    TimeWindow.LAST_DAY: "Last Day",
    TimeWindow.LAST_WEEK: "Last 7 Days",
    TimeWindow.LAST_MONTH: "Last 30 Days",
}


@dataclass(frozen=True)
class FilterCriteria:
    """Current user-selected filter state.

    Ranges are inclusive on both ends. A crossed range (min > max) is kept
    as-is and simply matches nothing.

    Attributes:
        magnitude_range: (min, max) magnitude, slider range 0-10
        depth_range_km: (min, max) depth in km, slider range 0-700
        time_window: Which remote feed to load (not applied here)
        place_keyword: Case-insensitive substring of the place; empty matches all
    """
    magnitude_range: tuple[float, float] = MAGNITUDE_LIMITS
    depth_range_km: tuple[float, float] = DEPTH_LIMITS_KM
    time_window: TimeWindow = TimeWindow.LAST_DAY
    place_keyword: str = ""

    def with_changes(self, **changes) -> "FilterCriteria":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def is_full_range(self) -> bool:
        """True when no client-side filter narrows the collection."""
        return (
            self.magnitude_range == MAGNITUDE_LIMITS
            and self.depth_range_km == DEPTH_LIMITS_KM
            and self.place_keyword == ""
        )


def matches_magnitude(event: SeismicEvent, criteria: FilterCriteria) -> bool:
    """Check the magnitude clause.

    Pure function. An event with no reported magnitude never matches.
    """
    if not event.has_magnitude:
        return False

    low, high = criteria.magnitude_range
    return event.magnitude >= low and event.magnitude <= high


def matches_depth(event: SeismicEvent, criteria: FilterCriteria) -> bool:
    """Check the depth clause.

    Pure function.
    """
    low, high = criteria.depth_range_km
    return event.depth_km >= low and event.depth_km <= high


def matches_place(event: SeismicEvent, criteria: FilterCriteria) -> bool:
    """Check the place keyword clause.

    Pure function. Missing places are matched as the empty string.
    """
    if criteria.place_keyword == "":
        return True

    place = event.place or ""
    return criteria.place_keyword.lower() in place.lower()


def matches_criteria(event: SeismicEvent, criteria: FilterCriteria) -> bool:
    """Evaluate all client-side clauses for one event.

    Pure function.

    Args:
        event: Event to check
        criteria: Current filter criteria

    Returns:
        True if the event passes every clause
    """
    return (
        matches_magnitude(event, criteria)
        and matches_depth(event, criteria)
        and matches_place(event, criteria)
    )


def apply_filters(
    events: list[SeismicEvent],
    criteria: FilterCriteria,
) -> list[SeismicEvent]:
    """Filter an event collection by the current criteria.

    Pure function. Output keeps input order.

    Args:
        events: Current event collection
        criteria: Filter criteria to apply

    Returns:
        Events that pass every clause
    """
    return [e for e in events if matches_criteria(e, criteria)]
