"""Tectonic plate boundary models - Pure functions.

This module parses the plate-boundary GeoJSON document into
BoundarySegment objects and decorates them with a boundary kind.

The boundary kind is SYNTHETIC DEMO DATA: it is drawn uniformly at
random per segment, once per loaded collection, and is not derived from
any geological classification. Every user-facing rendering carries
SYNTHETIC_NOTICE.
"""

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


SYNTHETIC_NOTICE = "Note: Boundaries are randomly assigned for demo."


class BoundaryKind(str, Enum):
    """Plate boundary classification."""
    CONVERGENT = "Convergent"
    DIVERGENT = "Divergent"
    TRANSFORM = "Transform"


BOUNDARY_COLORS = {
    BoundaryKind.CONVERGENT: "#FF0000",
    BoundaryKind.DIVERGENT: "#006400",
    BoundaryKind.TRANSFORM: "#0000FF",
}

# Used when a segment has not been decorated yet
FALLBACK_BOUNDARY_COLOR = "#FF00FF"

BOUNDARY_DESCRIPTIONS = {
    BoundaryKind.CONVERGENT: "Convergent: Plates collide → Strong earthquakes",
    BoundaryKind.DIVERGENT: "Divergent: Plates move apart → Moderate earthquakes",
    BoundaryKind.TRANSFORM: "Transform: Plates slide past → Shallow earthquakes",
}

LinePath = tuple[tuple[float, float], ...]


@dataclass(frozen=True)
class BoundarySegment:
    """One plate-boundary line feature.

    Attributes:
        geometry: One or more paths of (longitude, latitude) pairs
        boundary_kind: Synthetic classification, None before decoration
        name: Boundary name from the source document (e.g. "AF-AN")
    """
    geometry: tuple[LinePath, ...]
    boundary_kind: BoundaryKind | None = None
    name: str = ""

    @property
    def color(self) -> str:
        if self.boundary_kind is None:
            return FALLBACK_BOUNDARY_COLOR
        return BOUNDARY_COLORS[self.boundary_kind]


def _parse_path(coords: Any) -> LinePath:
    return tuple((float(point[0]), float(point[1])) for point in coords)


def parse_boundary(feature: dict[str, Any]) -> BoundarySegment | None:
    """Parse a single LineString/MultiLineString feature.

    Pure function.

    Args:
        feature: GeoJSON feature dict

    Returns:
        BoundarySegment or None if the geometry is unusable
    """
    try:
        geometry = feature.get("geometry") or {}
        geometry_type = geometry.get("type")
        coords = geometry.get("coordinates") or []
        props = feature.get("properties") or {}

        if geometry_type == "LineString":
            paths = (_parse_path(coords),)
        elif geometry_type == "MultiLineString":
            paths = tuple(_parse_path(part) for part in coords)
        else:
            return None

        paths = tuple(p for p in paths if len(p) >= 2)
        if not paths:
            return None

        return BoundarySegment(
            geometry=paths,
            name=str(props.get("Name") or props.get("name") or ""),
        )
    except (IndexError, TypeError, ValueError, AttributeError):
        return None


def parse_boundaries(geojson: Any) -> list[BoundarySegment]:
    """Parse the plate-boundary FeatureCollection.

    Pure function: skips features without line geometry.

    Raises:
        ValueError: If the body is not a feature collection
    """
    if not isinstance(geojson, dict) or not isinstance(geojson.get("features"), list):
        raise ValueError("Boundaries body is not a feature collection")

    segments = []
    for feature in geojson["features"]:
        if not isinstance(feature, dict):
            continue
        segment = parse_boundary(feature)
        if segment is not None:
            segments.append(segment)

    return segments


def draw_boundary_kind(rng: random.Random) -> BoundaryKind:
    """Draw one kind uniformly from the three boundary kinds."""
    return rng.choice(list(BoundaryKind))


def assign_boundary_kinds(
    segments: list[BoundarySegment],
    rng: random.Random,
) -> list[BoundarySegment]:
    """Label every segment with an independently drawn boundary kind.

    The result is synthetic demo data. Call once per loaded collection;
    the returned segments keep their kind for the rest of the session.

    Args:
        segments: Undecorated segments
        rng: Randomness source (unseeded in production)

    Returns:
        New segments, same order, each with a boundary kind
    """
    return [replace(s, boundary_kind=draw_boundary_kind(rng)) for s in segments]
