"""Map layer styling - Pure functions.

This module turns filtered events and boundary segments into styled map
layers: circle specs for events, line specs for plate boundaries, and the
GeoJSON the map surface consumes. Rendering (I/O) is handled by the shell
layer.
"""

from dataclasses import dataclass
from typing import Any

from src.core.boundaries import (
    BOUNDARY_DESCRIPTIONS,
    BoundarySegment,
    LinePath,
    SYNTHETIC_NOTICE,
)
from src.core.earthquake import SeismicEvent
from src.core.formatter import (
    format_boundary_tooltip,
    format_event_popup,
    format_event_tooltip,
)
from src.core.report import MagnitudeBand, classify_magnitude


BAND_COLORS = {
    MagnitudeBand.MINOR: "green",
    MagnitudeBand.MODERATE: "orange",
    MagnitudeBand.STRONG: "red",
}

# Circle radius on the map, in meters
RADIUS_PER_MAGNITUDE_M = 20000
MIN_RADIUS_M = 10000

BOUNDARY_WEIGHT = 2
BOUNDARY_DASH = "5,5"

PULSING_CLASS = "pulsing-circle"


@dataclass(frozen=True)
class MapConfig:
    """Immutable configuration for a static map image.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level (0-18)
        width: Image width in pixels
        height: Image height in pixels
    """
    latitude: float
    longitude: float
    zoom: int
    width: int
    height: int


@dataclass(frozen=True)
class CircleSpec:
    """Styled circle for one event.

    Attributes:
        event_id: Source event ID
        latitude: Circle center latitude
        longitude: Circle center longitude
        radius_m: Radius in meters (map units)
        radius_px: Radius in pixels for static images
        color: Stroke/fill color
        fill_opacity: Fill opacity (0-1)
        pulsing: Whether the marker is animated
        popup: Popup text
        tooltip: Hover text
    """
    event_id: str
    latitude: float
    longitude: float
    radius_m: float
    radius_px: int
    color: str
    fill_opacity: float
    pulsing: bool
    popup: str
    tooltip: str


@dataclass(frozen=True)
class LineSpec:
    """Styled polyline(s) for one boundary segment."""
    paths: tuple[LinePath, ...]
    color: str
    weight: int
    dash_array: str
    tooltip: str
    popup: str
    kind: str = ""


def get_magnitude_color(magnitude: float) -> str:
    """Get marker color for a magnitude.

    Pure function. Green below 3, orange below 5, red otherwise.
    """
    return BAND_COLORS[classify_magnitude(magnitude)]


def get_circle_radius_m(magnitude: float) -> float:
    """Circle radius in meters, scaled by magnitude with a floor."""
    return max(magnitude * RADIUS_PER_MAGNITUDE_M, MIN_RADIUS_M)


def get_marker_radius(magnitude: float) -> int:
    """Determine marker radius in pixels for static images.

    Pure function. Larger earthquakes get bigger markers.
    """
    # Roughly 3-13 pixels
    base_radius = 3
    scale_factor = 1
    return max(base_radius, min(int(base_radius + magnitude * scale_factor), 13))


def is_pulsing(magnitude: float) -> bool:
    """Strong events are drawn with the pulse animation."""
    return classify_magnitude(magnitude) is MagnitudeBand.STRONG


def get_fill_opacity(magnitude: float) -> float:
    return 0.8 if is_pulsing(magnitude) else 0.5


def create_circle_spec(event: SeismicEvent) -> CircleSpec | None:
    """Style one event.

    Pure function. Events without a magnitude cannot be styled and yield None.
    """
    if not event.has_magnitude:
        return None

    magnitude = event.magnitude
    return CircleSpec(
        event_id=event.id,
        latitude=event.latitude,
        longitude=event.longitude,
        radius_m=get_circle_radius_m(magnitude),
        radius_px=get_marker_radius(magnitude),
        color=get_magnitude_color(magnitude),
        fill_opacity=get_fill_opacity(magnitude),
        pulsing=is_pulsing(magnitude),
        popup=format_event_popup(event),
        tooltip=format_event_tooltip(event),
    )


def create_event_layer(events: list[SeismicEvent]) -> list[CircleSpec]:
    """Style every filtered event, keeping order.

    Pure function.
    """
    specs = [create_circle_spec(e) for e in events]
    return [s for s in specs if s is not None]


def create_line_spec(segment: BoundarySegment) -> LineSpec:
    """Style one boundary segment.

    Pure function.
    """
    description = ""
    if segment.boundary_kind is not None:
        description = BOUNDARY_DESCRIPTIONS[segment.boundary_kind]

    return LineSpec(
        paths=segment.geometry,
        color=segment.color,
        weight=BOUNDARY_WEIGHT,
        dash_array=BOUNDARY_DASH,
        tooltip=format_boundary_tooltip(segment),
        popup=f"<b>{description}</b><br/><i>{SYNTHETIC_NOTICE}</i>",
        kind=segment.boundary_kind.value if segment.boundary_kind else "",
    )


def create_boundary_layer(segments: list[BoundarySegment]) -> list[LineSpec]:
    """Style every boundary segment.

    Pure function.
    """
    return [create_line_spec(s) for s in segments]


def event_layer_geojson(specs: list[CircleSpec]) -> dict[str, Any]:
    """Serialize circle specs as a GeoJSON FeatureCollection.

    Pure function.
    """
    features = []
    for spec in specs:
        features.append({
            "type": "Feature",
            "id": spec.event_id,
            "geometry": {
                "type": "Point",
                "coordinates": [spec.longitude, spec.latitude],
            },
            "properties": {
                "radius_m": spec.radius_m,
                "color": spec.color,
                "fill_opacity": spec.fill_opacity,
                "class_name": PULSING_CLASS if spec.pulsing else "",
                "popup": spec.popup,
                "tooltip": spec.tooltip,
            },
        })

    return {"type": "FeatureCollection", "features": features}


def boundary_layer_geojson(specs: list[LineSpec]) -> dict[str, Any]:
    """Serialize line specs as a GeoJSON FeatureCollection.

    Pure function.
    """
    features = []
    for spec in specs:
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "MultiLineString",
                "coordinates": [[list(point) for point in path] for path in spec.paths],
            },
            "properties": {
                "kind": spec.kind,
                "color": spec.color,
                "weight": spec.weight,
                "dash_array": spec.dash_array,
                "tooltip": spec.tooltip,
                "popup": spec.popup,
            },
        })

    return {
        "type": "FeatureCollection",
        "features": features,
        "notice": SYNTHETIC_NOTICE,
    }


def create_map_config(
    latitude: float,
    longitude: float,
    zoom: int,
    width: int = 800,
    height: int = 400,
) -> MapConfig:
    """Create map configuration for a snapshot.

    Pure function.
    """
    return MapConfig(
        latitude=latitude,
        longitude=longitude,
        zoom=zoom,
        width=width,
        height=height,
    )
