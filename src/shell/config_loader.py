"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, MapDefaults) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, MapDefaults
from src.core.filters import FilterCriteria, TimeWindow


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be a ${VAR} environment placeholder.

    Args:
        value: Value to resolve

    Returns:
        Resolved value, or the original placeholder if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_range(data: Any, default: tuple[float, float]) -> tuple[float, float]:
    """Parse a [min, max] pair from config data."""
    if data is None:
        return default

    if isinstance(data, dict):
        low, high = data.get("min", default[0]), data.get("max", default[1])
    else:
        low, high = data

    return (float(low), float(high))


def _parse_criteria(data: dict[str, Any]) -> FilterCriteria:
    """Parse default filter criteria from config data."""
    defaults = FilterCriteria()

    window = defaults.time_window
    if "time_window" in data:
        window = TimeWindow.from_token(str(_resolve_value(data["time_window"])))

    return FilterCriteria(
        magnitude_range=_parse_range(data.get("magnitude_range"), defaults.magnitude_range),
        depth_range_km=_parse_range(data.get("depth_range_km"), defaults.depth_range_km),
        time_window=window,
        place_keyword=str(_resolve_value(data.get("place_keyword", ""))),
    )


def _parse_map(data: dict[str, Any]) -> MapDefaults:
    """Parse map defaults from config data."""
    defaults = MapDefaults()
    center = data.get("center", {})

    return MapDefaults(
        center_latitude=float(center.get("latitude", defaults.center_latitude)),
        center_longitude=float(center.get("longitude", defaults.center_longitude)),
        zoom=int(data.get("zoom", defaults.zoom)),
        mobile_zoom=int(data.get("mobile_zoom", defaults.mobile_zoom)),
        search_zoom=int(data.get("search_zoom", defaults.search_zoom)),
        image_width=int(data.get("image_width", defaults.image_width)),
        image_height=int(data.get("image_height", defaults.image_height)),
        tile_url=_resolve_value(data.get("tile_url", defaults.tile_url)),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Build a Config from already-parsed YAML data.

    Args:
        data: Mapping as loaded from the YAML file

    Returns:
        Parsed Config object
    """
    defaults = Config()

    return Config(
        events_feed_base=_resolve_value(data.get("events_feed_base", defaults.events_feed_base)),
        boundaries_url=_resolve_value(data.get("boundaries_url", defaults.boundaries_url)),
        geocoder_url=_resolve_value(data.get("geocoder_url", defaults.geocoder_url)),
        user_agent=_resolve_value(data.get("user_agent", defaults.user_agent)),
        request_timeout_seconds=int(
            data.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
        default_criteria=_parse_criteria(data.get("default_criteria") or {}),
        map=_parse_map(data.get("map") or {}),
        top_locations_limit=int(data.get("top_locations_limit", defaults.top_locations_limit)),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object (defaults if the file is missing or empty)

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)

    logger.info(
        "Loaded config: default window %s, geocoder %s",
        config.default_time_window.token,
        config.geocoder_url,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration overrides from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        QUAKE_TIME_WINDOW: Initial feed (all_hour, all_day, all_week, all_month)
        QUAKE_MIN_MAGNITUDE / QUAKE_MAX_MAGNITUDE: Initial magnitude range
        QUAKE_MIN_DEPTH / QUAKE_MAX_DEPTH: Initial depth range in km
        QUAKE_PLACE_FILTER: Initial place keyword
        GEOCODER_USER_AGENT: User-Agent for all requests
        REQUEST_TIMEOUT: HTTP timeout in seconds

    Returns:
        Config object from environment
    """
    defaults = FilterCriteria()

    window = defaults.time_window
    window_token = os.environ.get("QUAKE_TIME_WINDOW")
    if window_token:
        window = TimeWindow.from_token(window_token)

    criteria = FilterCriteria(
        magnitude_range=(
            float(os.environ.get("QUAKE_MIN_MAGNITUDE", defaults.magnitude_range[0])),
            float(os.environ.get("QUAKE_MAX_MAGNITUDE", defaults.magnitude_range[1])),
        ),
        depth_range_km=(
            float(os.environ.get("QUAKE_MIN_DEPTH", defaults.depth_range_km[0])),
            float(os.environ.get("QUAKE_MAX_DEPTH", defaults.depth_range_km[1])),
        ),
        time_window=window,
        place_keyword=os.environ.get("QUAKE_PLACE_FILTER", ""),
    )

    config_defaults = Config()

    return Config(
        user_agent=os.environ.get("GEOCODER_USER_AGENT", config_defaults.user_agent),
        request_timeout_seconds=int(
            os.environ.get("REQUEST_TIMEOUT", config_defaults.request_timeout_seconds)
        ),
        default_criteria=criteria,
    )
