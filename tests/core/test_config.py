"""Unit tests for configuration validation."""

from src.core.config import (
    Config,
    MapDefaults,
    validate_config,
    validate_coordinates,
    validate_range,
)
from src.core.filters import FilterCriteria, TimeWindow


class TestConfigDefaults:
    """Tests for default configuration values."""

    def test_map_defaults(self):
        """World view centered at 20N, 0E."""
        defaults = MapDefaults()

        assert (defaults.center_latitude, defaults.center_longitude) == (20.0, 0.0)
        assert defaults.zoom == 2
        assert defaults.mobile_zoom == 3
        assert defaults.search_zoom == 8

    def test_default_window_is_last_day(self):
        assert Config().default_time_window == TimeWindow.LAST_DAY

    def test_default_feed_urls(self):
        config = Config()

        assert config.events_feed_base.startswith("https://earthquake.usgs.gov/")
        assert config.boundaries_url.endswith("PB2002_boundaries.json")
        assert "nominatim" in config.geocoder_url


class TestValidateCoordinates:
    """Tests for validate_coordinates()."""

    def test_valid_coordinates(self):
        assert validate_coordinates(35.0, 139.0, "center") == []

    def test_out_of_range(self):
        errors = validate_coordinates(95.0, -190.0, "center")

        assert len(errors) == 2


class TestValidateRange:
    """Tests for validate_range()."""

    def test_in_limits(self):
        assert validate_range((2.0, 6.0), (0.0, 10.0), "magnitude") == []

    def test_outside_limits_is_error(self):
        errors = validate_range((-1.0, 11.0), (0.0, 10.0), "magnitude")

        assert [e.field for e in errors] == ["magnitude.min", "magnitude.max"]
        assert all(e.severity == "error" for e in errors)

    def test_crossed_range_is_warning(self):
        errors = validate_range((6.0, 2.0), (0.0, 10.0), "magnitude")

        assert len(errors) == 1
        assert errors[0].severity == "warning"


class TestValidateConfig:
    """Tests for validate_config()."""

    def test_defaults_are_valid(self):
        result = validate_config(Config())

        assert result.valid
        assert result.errors == []

    def test_bad_zoom_and_timeout(self):
        config = Config(request_timeout_seconds=0, map=MapDefaults(search_zoom=22))

        result = validate_config(config)

        assert not result.valid
        fields = {e.field for e in result.critical_errors}
        assert "map.search_zoom" in fields
        assert "request_timeout_seconds" in fields

    def test_unresolved_url_is_warning(self):
        config = Config(geocoder_url="${GEOCODER_URL}")

        result = validate_config(config)

        assert result.valid
        assert result.warnings[0].field == "geocoder_url"

    def test_crossed_default_range_still_valid(self):
        config = Config(default_criteria=FilterCriteria(depth_range_km=(300.0, 100.0)))

        result = validate_config(config)

        assert result.valid
        assert len(result.warnings) == 1
