"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Event and plate-boundary parsing
- Client-side filtering
- Report aggregation
- Map layer styling and text formatting
- Map state transitions

All functions here are deterministic and have no I/O (boundary kind
assignment takes its randomness source as an argument).
"""

from src.core.earthquake import SeismicEvent, parse_events
from src.core.boundaries import BoundaryKind, BoundarySegment, assign_boundary_kinds, parse_boundaries
from src.core.filters import FilterCriteria, TimeWindow, apply_filters
from src.core.report import AggregateReport, NO_DATA, NoData, summarize
from src.core.geocode import Coordinates, normalize_query
from src.core.state import MapState, build_render_set

__all__ = [
    # Events
    "SeismicEvent",
    "parse_events",
    # Boundaries
    "BoundaryKind",
    "BoundarySegment",
    "assign_boundary_kinds",
    "parse_boundaries",
    # Filters
    "FilterCriteria",
    "TimeWindow",
    "apply_filters",
    # Report
    "AggregateReport",
    "NO_DATA",
    "NoData",
    "summarize",
    # Geocode
    "Coordinates",
    "normalize_query",
    # State
    "MapState",
    "build_render_set",
]
