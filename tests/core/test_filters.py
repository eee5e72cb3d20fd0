"""Unit tests for event filtering.

These tests verify the filter predicates and TimeWindow tokens
without any I/O.
"""

import pytest

from src.core.earthquake import SeismicEvent
from src.core.filters import (
    DEPTH_LIMITS_KM,
    MAGNITUDE_LIMITS,
    FilterCriteria,
    TimeWindow,
    apply_filters,
    matches_criteria,
    matches_depth,
    matches_magnitude,
    matches_place,
)


def make_event(
    event_id: str = "test123",
    magnitude: float | None = 4.0,
    place: str = "Test Location",
    depth_km: float = 10.0,
) -> SeismicEvent:
    """Factory for creating test events."""
    return SeismicEvent(
        id=event_id,
        place=place,
        magnitude=magnitude,
        depth_km=depth_km,
        longitude=0.0,
        latitude=0.0,
        occurred_at_ms=1703001600000,
    )


@pytest.fixture
def full_range():
    return FilterCriteria()


class TestTimeWindow:
    """Tests for TimeWindow feed tokens and labels."""

    def test_tokens_match_usgs_feed_names(self):
        """Tokens are the USGS summary feed names."""
        assert [w.token for w in TimeWindow] == [
            "all_hour",
            "all_day",
            "all_week",
            "all_month",
        ]

    def test_labels(self):
        """Labels shown in the time range selector."""
        assert TimeWindow.LAST_HOUR.label == "Last Hour"
        assert TimeWindow.LAST_WEEK.label == "Last 7 Days"
        assert TimeWindow.LAST_MONTH.label == "Last 30 Days"

    def test_from_token(self):
        """Should look up a window by token."""
        assert TimeWindow.from_token("all_week") is TimeWindow.LAST_WEEK

    def test_from_token_rejects_unknown(self):
        """Unknown tokens raise ValueError listing valid choices."""
        with pytest.raises(ValueError, match="all_hour"):
            TimeWindow.from_token("all_year")


class TestFilterCriteria:
    """Tests for FilterCriteria defaults and copying."""

    def test_defaults_are_full_range(self, full_range):
        """Default criteria span both sliders with no keyword."""
        assert full_range.magnitude_range == MAGNITUDE_LIMITS
        assert full_range.depth_range_km == DEPTH_LIMITS_KM
        assert full_range.time_window == TimeWindow.LAST_DAY
        assert full_range.is_full_range

    def test_with_changes_returns_new_instance(self, full_range):
        """with_changes does not mutate the original."""
        narrowed = full_range.with_changes(place_keyword="alaska")

        assert narrowed.place_keyword == "alaska"
        assert full_range.place_keyword == ""
        assert not narrowed.is_full_range


class TestMagnitudeClause:
    """Tests for matches_magnitude()."""

    def test_bounds_are_inclusive(self):
        """Both ends of the range match."""
        criteria = FilterCriteria(magnitude_range=(3.0, 5.0))

        assert matches_magnitude(make_event(magnitude=3.0), criteria)
        assert matches_magnitude(make_event(magnitude=5.0), criteria)
        assert not matches_magnitude(make_event(magnitude=5.01), criteria)

    def test_missing_magnitude_never_matches(self, full_range):
        """Events without a magnitude fail the magnitude clause."""
        assert not matches_magnitude(make_event(magnitude=None), full_range)

    def test_negative_magnitude_outside_default_range(self, full_range):
        """Negative magnitudes fall below the slider minimum."""
        assert not matches_magnitude(make_event(magnitude=-0.5), full_range)


class TestDepthClause:
    """Tests for matches_depth()."""

    def test_bounds_are_inclusive(self):
        criteria = FilterCriteria(depth_range_km=(10.0, 70.0))

        assert matches_depth(make_event(depth_km=10.0), criteria)
        assert matches_depth(make_event(depth_km=70.0), criteria)
        assert not matches_depth(make_event(depth_km=70.5), criteria)


class TestPlaceClause:
    """Tests for matches_place()."""

    def test_empty_keyword_matches_everything(self, full_range):
        assert matches_place(make_event(place=""), full_range)

    def test_case_insensitive_substring(self):
        """Keyword 'y' matches place 'Y'."""
        criteria = FilterCriteria(place_keyword="y")

        assert matches_place(make_event(place="Y"), criteria)
        assert not matches_place(make_event(place="X"), criteria)

    def test_keyword_against_missing_place(self):
        """A missing place only matches the empty keyword."""
        criteria = FilterCriteria(place_keyword="alaska")

        assert not matches_place(make_event(place=""), criteria)


class TestApplyFilters:
    """Tests for apply_filters()."""

    def test_full_range_keeps_every_rated_event_in_range(self, full_range):
        """Clearing all filters returns the full in-range collection."""
        events = [
            make_event("a", magnitude=1.0),
            make_event("b", magnitude=6.5, depth_km=650.0),
            make_event("c", magnitude=9.9),
        ]

        assert apply_filters(events, full_range) == events

    def test_keeps_input_order(self, full_range):
        events = [make_event("b"), make_event("a"), make_event("c")]

        result = apply_filters(events, full_range)

        assert [e.id for e in result] == ["b", "a", "c"]

    def test_all_clauses_must_pass(self):
        """Events must satisfy magnitude, depth and place together."""
        criteria = FilterCriteria(
            magnitude_range=(4.0, 10.0),
            depth_range_km=(0.0, 50.0),
            place_keyword="japan",
        )
        events = [
            make_event("hit", magnitude=5.0, depth_km=20.0, place="Honshu, Japan"),
            make_event("weak", magnitude=3.0, depth_km=20.0, place="Honshu, Japan"),
            make_event("deep", magnitude=5.0, depth_km=300.0, place="Honshu, Japan"),
            make_event("elsewhere", magnitude=5.0, depth_km=20.0, place="Chile"),
        ]

        result = apply_filters(events, criteria)

        assert [e.id for e in result] == ["hit"]
        assert all(matches_criteria(e, criteria) for e in result)

    def test_crossed_range_matches_nothing(self):
        """A min greater than max is kept and yields an empty set."""
        criteria = FilterCriteria(magnitude_range=(6.0, 2.0))

        assert apply_filters([make_event(magnitude=4.0)], criteria) == []

    def test_filtering_is_idempotent(self):
        criteria = FilterCriteria(magnitude_range=(2.0, 5.0))
        events = [make_event(str(m), magnitude=m) for m in (1.0, 2.5, 4.0, 6.0)]

        once = apply_filters(events, criteria)

        assert apply_filters(once, criteria) == once
