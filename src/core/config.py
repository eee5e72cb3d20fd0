"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.filters import (
    DEPTH_LIMITS_KM,
    MAGNITUDE_LIMITS,
    FilterCriteria,
    TimeWindow,
)


USGS_FEED_BASE = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"
PLATE_BOUNDARIES_URL = (
    "https://raw.githubusercontent.com/fraxen/tectonicplates/master/GeoJSON/PB2002_boundaries.json"
)
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
OSM_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


@dataclass
class MapDefaults:
    """Initial map view and snapshot settings.

    Attributes:
        center_latitude: Initial view center latitude
        center_longitude: Initial view center longitude
        zoom: Initial zoom on wide screens
        mobile_zoom: Initial zoom on narrow screens
        search_zoom: Zoom used when recentering on a search result
        image_width: Snapshot width in pixels
        image_height: Snapshot height in pixels
        tile_url: Tile URL template for snapshots
    """
    center_latitude: float = 20.0
    center_longitude: float = 0.0
    zoom: int = 2
    mobile_zoom: int = 3
    search_zoom: int = 8
    image_width: int = 1024
    image_height: int = 512
    tile_url: str = OSM_TILE_URL


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        events_feed_base: Base URL of the USGS summary feeds
        boundaries_url: URL of the plate-boundary GeoJSON document
        geocoder_url: Place-search endpoint
        user_agent: User-Agent sent with every request
        request_timeout_seconds: HTTP timeout for all fetches
        default_criteria: Filter state a new session starts with
        map: Map view defaults
        top_locations_limit: Number of places in the report ranking
    """
    events_feed_base: str = USGS_FEED_BASE
    boundaries_url: str = PLATE_BOUNDARIES_URL
    geocoder_url: str = NOMINATIM_SEARCH_URL
    user_agent: str = "quake-atlas/1.0"
    request_timeout_seconds: int = 30
    default_criteria: FilterCriteria = field(default_factory=FilterCriteria)
    map: MapDefaults = field(default_factory=MapDefaults)
    top_locations_limit: int = 5

    @property
    def default_time_window(self) -> TimeWindow:
        return self.default_criteria.time_window


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_range(
    value_range: tuple[float, float],
    limits: tuple[float, float],
    field_name: str,
) -> list[ValidationError]:
    """Validate a slider range against its limits.

    Pure function. A crossed range is allowed (it filters out everything)
    but reported as a warning.

    Args:
        value_range: (min, max) to check
        limits: (lowest, highest) allowed values
        field_name: Name of the field for error messages

    Returns:
        List of validation errors/warnings
    """
    errors = []
    low, high = value_range
    lowest, highest = limits

    for name, value in (("min", low), ("max", high)):
        if not lowest <= value <= highest:
            errors.append(ValidationError(
                field=f"{field_name}.{name}",
                message=f"{value} out of range [{lowest:g}, {highest:g}]",
            ))

    if low > high:
        errors.append(ValidationError(
            field=field_name,
            message=f"min ({low}) > max ({high}); no events will match",
            severity="warning",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    criteria = config.default_criteria
    errors.extend(validate_range(
        criteria.magnitude_range,
        MAGNITUDE_LIMITS,
        "default_criteria.magnitude_range",
    ))
    errors.extend(validate_range(
        criteria.depth_range_km,
        DEPTH_LIMITS_KM,
        "default_criteria.depth_range_km",
    ))

    errors.extend(validate_coordinates(
        config.map.center_latitude,
        config.map.center_longitude,
        "map.center",
    ))

    for name in ("zoom", "mobile_zoom", "search_zoom"):
        zoom = getattr(config.map, name)
        if not 0 <= zoom <= 18:
            errors.append(ValidationError(
                field=f"map.{name}",
                message=f"Zoom {zoom} out of range [0, 18]",
            ))

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.top_locations_limit <= 0:
        errors.append(ValidationError(
            field="top_locations_limit",
            message=f"Limit must be positive, got {config.top_locations_limit}",
        ))

    for name in ("events_feed_base", "boundaries_url", "geocoder_url"):
        url = getattr(config, name)
        if not url or url.startswith("${"):
            errors.append(ValidationError(
                field=name,
                message="URL not resolved (still contains placeholder)",
                severity="warning",
            ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
