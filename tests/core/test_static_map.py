"""Unit tests for map layer styling.

These tests verify the pure functions that style events and boundaries.
No I/O, no mocks needed.
"""

import pytest

from src.core.boundaries import SYNTHETIC_NOTICE, BoundaryKind, BoundarySegment
from src.core.earthquake import SeismicEvent
from src.core.static_map import (
    BOUNDARY_DASH,
    PULSING_CLASS,
    MapConfig,
    boundary_layer_geojson,
    create_boundary_layer,
    create_circle_spec,
    create_event_layer,
    create_line_spec,
    create_map_config,
    event_layer_geojson,
    get_circle_radius_m,
    get_fill_opacity,
    get_magnitude_color,
    get_marker_radius,
    is_pulsing,
)


def make_event(event_id: str = "e1", magnitude: float | None = 4.0) -> SeismicEvent:
    """Factory for creating test events."""
    return SeismicEvent(
        id=event_id,
        place="Offshore Chile",
        magnitude=magnitude,
        depth_km=20.0,
        longitude=-72.5,
        latitude=-33.4,
        occurred_at_ms=1703001600000,
    )


class TestGetMagnitudeColor:
    """Tests for get_magnitude_color() pure function."""

    @pytest.mark.parametrize(
        "magnitude,expected",
        [
            (1.0, "green"),
            (2.9, "green"),
            (3.0, "orange"),
            (4.9, "orange"),
            (5.0, "red"),
            (7.5, "red"),
        ],
    )
    def test_color_by_band(self, magnitude, expected):
        assert get_magnitude_color(magnitude) == expected


class TestRadius:
    """Tests for circle and marker sizes."""

    def test_radius_scales_with_magnitude(self):
        assert get_circle_radius_m(4.0) == 80000
        assert get_circle_radius_m(6.0) == 120000

    def test_radius_has_floor(self):
        """Small or negative magnitudes still get a visible circle."""
        assert get_circle_radius_m(0.2) == 10000
        assert get_circle_radius_m(-1.0) == 10000

    def test_marker_radius_is_clamped(self):
        assert get_marker_radius(-2.0) == 3
        assert get_marker_radius(4.0) == 7
        assert get_marker_radius(12.0) == 13


class TestStrongEventStyle:
    """Tests for pulse and opacity."""

    def test_strong_events_pulse(self):
        assert is_pulsing(5.0)
        assert not is_pulsing(4.99)

    def test_fill_opacity(self):
        assert get_fill_opacity(6.0) == 0.8
        assert get_fill_opacity(2.0) == 0.5


class TestEventLayer:
    """Tests for create_circle_spec() and create_event_layer()."""

    def test_circle_spec_fields(self):
        spec = create_circle_spec(make_event(magnitude=5.5))

        assert spec.event_id == "e1"
        assert (spec.latitude, spec.longitude) == (-33.4, -72.5)
        assert spec.color == "red"
        assert spec.pulsing is True
        assert spec.fill_opacity == 0.8
        assert spec.tooltip == "Offshore Chile - Mag: 5.5"

    def test_unrated_event_is_not_drawn(self):
        assert create_circle_spec(make_event(magnitude=None)) is None

    def test_layer_keeps_order_and_skips_unrated(self):
        events = [make_event("a", 1.0), make_event("b", None), make_event("c", 6.0)]

        layer = create_event_layer(events)

        assert [s.event_id for s in layer] == ["a", "c"]

    def test_layer_geojson(self):
        layer = create_event_layer([make_event("a", 6.0), make_event("b", 2.0)])

        geojson = event_layer_geojson(layer)

        assert geojson["type"] == "FeatureCollection"
        first = geojson["features"][0]
        assert first["id"] == "a"
        assert first["geometry"]["coordinates"] == [-72.5, -33.4]
        assert first["properties"]["class_name"] == PULSING_CLASS
        assert geojson["features"][1]["properties"]["class_name"] == ""


class TestBoundaryLayer:
    """Tests for boundary line styling."""

    def test_line_spec_style(self):
        segment = BoundarySegment(
            geometry=(((0.0, 0.0), (1.0, 1.0)),),
            boundary_kind=BoundaryKind.CONVERGENT,
        )

        spec = create_line_spec(segment)

        assert spec.color == "#FF0000"
        assert spec.weight == 2
        assert spec.dash_array == BOUNDARY_DASH
        assert spec.tooltip == "Convergent Plate Boundary"
        assert "Plates collide" in spec.popup
        assert SYNTHETIC_NOTICE in spec.popup

    def test_geojson_carries_synthetic_notice(self):
        segments = [
            BoundarySegment(geometry=(((0.0, 0.0), (1.0, 1.0)),), boundary_kind=BoundaryKind.DIVERGENT),
        ]

        geojson = boundary_layer_geojson(create_boundary_layer(segments))

        assert geojson["notice"] == SYNTHETIC_NOTICE
        feature = geojson["features"][0]
        assert feature["geometry"]["type"] == "MultiLineString"
        assert feature["geometry"]["coordinates"] == [[[0.0, 0.0], [1.0, 1.0]]]
        assert feature["properties"]["color"] == "#006400"
        assert feature["properties"]["kind"] == "Divergent"


class TestCreateMapConfig:
    """Tests for create_map_config() pure function."""

    def test_creates_config(self):
        config = create_map_config(20.0, 0.0, 2, width=1024, height=512)

        assert config == MapConfig(latitude=20.0, longitude=0.0, zoom=2, width=1024, height=512)

    def test_default_size(self):
        config = create_map_config(0.0, 0.0, 3)

        assert (config.width, config.height) == (800, 400)
