"""Unit tests for report aggregation."""

import random

import pytest

from src.core.boundaries import BoundaryKind, BoundarySegment, assign_boundary_kinds
from src.core.earthquake import SeismicEvent
from src.core.filters import FilterCriteria, apply_filters
from src.core.report import (
    NO_DATA,
    NO_DATA_MESSAGE,
    AggregateReport,
    MagnitudeBand,
    classify_magnitude,
    count_bands,
    count_boundary_kinds,
    rank_places,
    summarize,
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
def sample_events():
    """Three events: X twice, Y once, one strong."""
    return [
        make_event("1", magnitude=2.0, place="X", depth_km=5.0),
        make_event("2", magnitude=4.0, place="Y", depth_km=30.0),
        make_event("3", magnitude=6.0, place="X", depth_km=100.0),
    ]


class TestClassifyMagnitude:
    """Tests for classify_magnitude()."""

    @pytest.mark.parametrize(
        "magnitude,expected",
        [
            (-1.0, MagnitudeBand.MINOR),
            (2.99, MagnitudeBand.MINOR),
            (3.0, MagnitudeBand.MODERATE),
            (4.99, MagnitudeBand.MODERATE),
            (5.0, MagnitudeBand.STRONG),
            (8.1, MagnitudeBand.STRONG),
        ],
    )
    def test_band_thresholds(self, magnitude, expected):
        """Strong at 5 and above, moderate from 3, minor below."""
        assert classify_magnitude(magnitude) == expected

    def test_count_bands_skips_unrated(self):
        counts = count_bands([make_event(magnitude=None), make_event(magnitude=5.5)])

        assert counts[MagnitudeBand.STRONG] == 1
        assert sum(counts.values()) == 1


class TestRankPlaces:
    """Tests for rank_places()."""

    def test_most_active_first(self, sample_events):
        assert rank_places(sample_events) == [("X", 2), ("Y", 1)]

    def test_ties_keep_first_occurrence_order(self):
        """Equal counts keep the order places first appear."""
        events = [make_event(place=p) for p in ["C", "A", "B", "A", "C", "B"]]

        assert rank_places(events) == [("C", 2), ("A", 2), ("B", 2)]

    def test_limits_to_top_five(self):
        events = [make_event(place=f"P{i}") for i in range(8)]

        result = rank_places(events)

        assert len(result) == 5
        assert [p for p, _ in result] == ["P0", "P1", "P2", "P3", "P4"]

    def test_empty_place_counts_as_unknown(self):
        events = [make_event(place=""), make_event(place="")]

        assert rank_places(events) == [("Unknown", 2)]


class TestCountBoundaryKinds:
    """Tests for count_boundary_kinds()."""

    def test_zero_fills_every_kind(self):
        segments = [BoundarySegment(geometry=(), boundary_kind=BoundaryKind.CONVERGENT)]

        counts = count_boundary_kinds(segments)

        assert counts == {
            BoundaryKind.CONVERGENT: 1,
            BoundaryKind.DIVERGENT: 0,
            BoundaryKind.TRANSFORM: 0,
        }

    def test_counts_sum_to_decorated_segments(self):
        segments = assign_boundary_kinds(
            [BoundarySegment(geometry=()) for _ in range(20)],
            random.Random(7),
        )

        assert sum(count_boundary_kinds(segments).values()) == 20


class TestSummarize:
    """Tests for summarize()."""

    def test_sample_report(self, sample_events):
        """Three events produce the expected summary values."""
        report = summarize(sample_events, None)

        assert isinstance(report, AggregateReport)
        assert report.total == 3
        assert report.strong == 1
        assert report.moderate == 1
        assert report.minor == 1
        assert report.formatted_avg_magnitude == "4.00"
        assert report.max_magnitude == 6.0
        assert report.min_magnitude == 2.0
        assert report.max_depth_km == 100.0
        assert report.min_depth_km == 5.0
        assert report.formatted_top_locations == ["X (2)", "Y (1)"]
        assert report.boundary_counts is None

    def test_magnitude_filter_then_summarize(self, sample_events):
        """Filtering to [5, 10] leaves only the strong event."""
        filtered = apply_filters(sample_events, FilterCriteria(magnitude_range=(5.0, 10.0)))

        report = summarize(filtered, None)

        assert report.total == 1
        assert report.strong == 1
        assert report.moderate == 0
        assert report.minor == 0

    def test_keyword_filter_then_summarize(self, sample_events):
        filtered = apply_filters(sample_events, FilterCriteria(place_keyword="y"))

        report = summarize(filtered, None)

        assert report.total == 1
        assert report.formatted_top_locations == ["Y (1)"]

    def test_empty_set_returns_no_data(self):
        """An empty filtered set yields the no-data marker, not zeros."""
        result = summarize([], None)

        assert result is NO_DATA
        assert not result
        assert result.message == NO_DATA_MESSAGE

    def test_bands_sum_to_total_for_filtered_input(self, sample_events):
        filtered = apply_filters(sample_events, FilterCriteria())

        report = summarize(filtered, None)

        assert report.strong + report.moderate + report.minor == report.total
        assert report.unrated == 0

    def test_unrated_events_are_counted_separately(self):
        report = summarize([make_event(magnitude=None), make_event(magnitude=3.5)], None)

        assert report.total == 2
        assert report.unrated == 1
        assert report.avg_magnitude == 3.5

    def test_all_unrated(self):
        report = summarize([make_event(magnitude=None)], None)

        assert report.avg_magnitude is None
        assert report.formatted_avg_magnitude == "n/a"
        assert report.max_magnitude is None

    def test_average_is_rounded_to_two_decimals(self):
        events = [make_event(magnitude=m) for m in (1.0, 1.0, 2.0)]

        assert summarize(events, None).avg_magnitude == 1.33

    def test_boundary_counts_when_loaded(self, sample_events):
        """Boundary counts cover the full collection, not the filtered events."""
        segments = [
            BoundarySegment(geometry=(), boundary_kind=BoundaryKind.TRANSFORM),
            BoundarySegment(geometry=(), boundary_kind=BoundaryKind.TRANSFORM),
        ]

        report = summarize(sample_events, segments)

        assert report.boundary_counts[BoundaryKind.TRANSFORM] == 2
        assert report.boundary_counts[BoundaryKind.CONVERGENT] == 0

    def test_summary_is_deterministic(self, sample_events):
        assert summarize(sample_events, None) == summarize(sample_events, None)


class TestThreeEventScenario:
    """The three-event walkthrough: (2, 10km, X), (6, 50km, Y), (4, 600km, X)."""

    @pytest.fixture
    def events(self):
        return [
            make_event("a", magnitude=2.0, place="X", depth_km=10.0),
            make_event("b", magnitude=6.0, place="Y", depth_km=50.0),
            make_event("c", magnitude=4.0, place="X", depth_km=600.0),
        ]

    def test_full_range_report(self, events):
        filtered = apply_filters(events, FilterCriteria())

        report = summarize(filtered, None)

        assert [e.id for e in filtered] == ["a", "b", "c"]
        assert report.total == 3
        assert (report.strong, report.moderate, report.minor) == (1, 1, 1)
        assert report.formatted_avg_magnitude == "4.00"
        assert report.max_depth_km == 600.0
        assert report.min_depth_km == 10.0
        assert report.formatted_top_locations == ["X (2)", "Y (1)"]

    def test_strong_only(self, events):
        report = summarize(apply_filters(events, FilterCriteria(magnitude_range=(5.0, 10.0))), None)

        assert report.total == 1
        assert (report.strong, report.moderate, report.minor) == (1, 0, 0)
        assert report.formatted_top_locations == ["Y (1)"]

    def test_keyword_matches_only_y(self, events):
        filtered = apply_filters(events, FilterCriteria(place_keyword="y"))

        assert [e.id for e in filtered] == ["b"]
