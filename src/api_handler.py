"""Web API Handler - Serves map data to the browser front end.

This module provides HTTP endpoints for the map page: filtered events
with their report, plate boundaries, place search and a PNG snapshot.
Part of the imperative shell - handles HTTP I/O.
"""

import json
import logging
from typing import Any

from flask import Request, Response

from src.core.earthquake import event_to_dict
from src.core.filters import FilterCriteria, TimeWindow
from src.core.formatter import format_filters_applied, format_report_text
from src.core.report import AggregateReport, NoData
from src.core.state import build_render_set
from src.core.static_map import (
    boundary_layer_geojson,
    create_boundary_layer,
    create_event_layer,
    create_map_config,
    event_layer_geojson,
)
from src.orchestrator import MapSession
from src.shell.static_map_client import StaticMapClient

logger = logging.getLogger(__name__)

# CORS allowed origins
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]


def _cors_headers(origin: str | None) -> dict[str, str]:
    """Generate CORS headers for the response."""
    headers = {
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "3600",
    }
    if origin and origin in ALLOWED_ORIGINS:
        headers["Access-Control-Allow-Origin"] = origin
    else:
        headers["Access-Control-Allow-Origin"] = ALLOWED_ORIGINS[0]
    return headers


def _json_response(
    data: dict[str, Any],
    status: int = 200,
    origin: str | None = None,
) -> Response:
    """Create a JSON response with CORS headers."""
    response = Response(
        json.dumps(data, default=str, ensure_ascii=False),
        status=status,
        mimetype="application/json",
    )
    for key, value in _cors_headers(origin).items():
        response.headers[key] = value
    return response


def preflight_response(request: Request) -> Response:
    """Answer a CORS preflight request."""
    response = Response("", status=204)
    for key, value in _cors_headers(request.headers.get("Origin")).items():
        response.headers[key] = value
    return response


def _float_arg(request: Request, name: str, default: float) -> float:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Query parameter '{name}' must be a number, got '{raw}'") from None


def parse_criteria(request: Request, defaults: FilterCriteria) -> FilterCriteria:
    """Build filter criteria from query parameters.

    Query params:
        window: Feed token (all_hour, all_day, all_week, all_month)
        min_magnitude, max_magnitude: Magnitude range
        min_depth, max_depth: Depth range in km
        place: Place keyword

    Raises:
        ValueError: If a parameter is malformed
    """
    window = defaults.time_window
    if request.args.get("window"):
        window = TimeWindow.from_token(request.args["window"])

    return FilterCriteria(
        magnitude_range=(
            _float_arg(request, "min_magnitude", defaults.magnitude_range[0]),
            _float_arg(request, "max_magnitude", defaults.magnitude_range[1]),
        ),
        depth_range_km=(
            _float_arg(request, "min_depth", defaults.depth_range_km[0]),
            _float_arg(request, "max_depth", defaults.depth_range_km[1]),
        ),
        time_window=window,
        place_keyword=request.args.get("place", defaults.place_keyword),
    )


def _criteria_to_dict(criteria: FilterCriteria) -> dict[str, Any]:
    return {
        "magnitude_range": list(criteria.magnitude_range),
        "depth_range_km": list(criteria.depth_range_km),
        "time_window": criteria.time_window.token,
        "time_window_label": criteria.time_window.label,
        "place_keyword": criteria.place_keyword,
    }


def _report_to_dict(report: AggregateReport | NoData) -> dict[str, Any]:
    """Convert the report (or the no-data marker) to a JSON-serializable dict."""
    if not report:
        return {"no_data": True, "message": report.message}

    boundary_counts = None
    if report.boundary_counts is not None:
        boundary_counts = {kind.value: count for kind, count in report.boundary_counts.items()}

    return {
        "no_data": False,
        "total": report.total,
        "strong": report.strong,
        "moderate": report.moderate,
        "minor": report.minor,
        "unrated": report.unrated,
        "avg_magnitude": report.avg_magnitude,
        "max_magnitude": report.max_magnitude,
        "min_magnitude": report.min_magnitude,
        "max_depth_km": report.max_depth_km,
        "min_depth_km": report.min_depth_km,
        "top_locations": report.formatted_top_locations,
        "boundary_counts": boundary_counts,
    }


def _view_to_dict(session: MapSession) -> dict[str, Any]:
    """Current map center plus the zoom levels a client should use."""
    view = session.state.view
    return {
        "latitude": view.latitude,
        "longitude": view.longitude,
        "zoom": view.zoom,
        "mobile_zoom": session.config.map.mobile_zoom,
        "search_zoom": session.config.map.search_zoom,
    }


def get_events(request: Request, session: MapSession) -> Response:
    """API endpoint: Filtered events, their map layer and the report.

    The time window selects the feed and triggers a fetch; the other
    parameters filter the fetched collection in memory.
    """
    origin = request.headers.get("Origin")

    try:
        criteria = parse_criteria(request, session.config.default_criteria)
    except ValueError as e:
        return _json_response({"error": str(e)}, status=400, origin=origin)

    session.load_boundaries()
    outcome = session.load_events(criteria.time_window)

    events = session.events_for(outcome)
    if events is None:
        # Fetch failed and no earlier collection exists for this window
        return _json_response(
            {"error": "Failed to fetch earthquake data"},
            status=502,
            origin=origin,
        )

    state = session.state
    render = build_render_set(
        events,
        criteria,
        state.boundaries,
        session.config.top_locations_limit,
    )

    response_data: dict[str, Any] = {
        "criteria": _criteria_to_dict(criteria),
        "filters_applied": format_filters_applied(criteria, state.search_location),
        "view": _view_to_dict(session),
        "count": len(render.filtered),
        "events": [event_to_dict(e) for e in render.filtered],
        "layer": event_layer_geojson(create_event_layer(render.filtered)),
        "report": _report_to_dict(render.report),
        "report_text": format_report_text(render.report, criteria, state.search_location),
        "notice": render.report.message if render.is_empty else None,
        "stale": not outcome.success,
    }

    if outcome.error is not None:
        response_data["error"] = outcome.error.describe()

    return _json_response(response_data, origin=origin)


def get_boundaries(request: Request, session: MapSession) -> Response:
    """API endpoint: Plate boundary layer with synthetic classification.

    Answers 503 with Retry-After while the first load is still in flight.
    """
    origin = request.headers.get("Origin")

    if not session.load_boundaries():
        if session.boundaries_loading:
            response = _json_response(
                {"error": "Plate boundaries are still loading"},
                status=503,
                origin=origin,
            )
            response.headers["Retry-After"] = "1"
            return response

        return _json_response(
            {"error": "Failed to fetch plate boundaries"},
            status=502,
            origin=origin,
        )

    segments = list(session.state.boundaries or ())
    return _json_response(
        boundary_layer_geojson(create_boundary_layer(segments)),
        origin=origin,
    )


def search_place(request: Request, session: MapSession) -> Response:
    """API endpoint: Resolve a place name to a map center.

    Query params:
        q: Free-text place name
    """
    origin = request.headers.get("Origin")

    result = session.search_place(request.args.get("q"))

    if result.skipped:
        response = Response("", status=204)
        for key, value in _cors_headers(origin).items():
            response.headers[key] = value
        return response

    if result.not_found:
        return _json_response({"error": session.state.notice}, status=404, origin=origin)

    if not result.success:
        return _json_response({"error": "Place search failed"}, status=502, origin=origin)

    return _json_response(
        {
            "latitude": result.coordinates.latitude,
            "longitude": result.coordinates.longitude,
            "display_name": result.coordinates.display_name,
            "zoom": session.config.map.search_zoom,
        },
        origin=origin,
    )


def get_map_image(
    request: Request,
    session: MapSession,
    static_map_client: StaticMapClient | None = None,
) -> Response:
    """API endpoint: PNG snapshot of the filtered events and boundaries.

    Accepts the same filter parameters as get_events, plus lat, lon and
    zoom for the snapshot center.
    """
    origin = request.headers.get("Origin")
    map_defaults = session.config.map

    try:
        criteria = parse_criteria(request, session.config.default_criteria)
        latitude = _float_arg(request, "lat", map_defaults.center_latitude)
        longitude = _float_arg(request, "lon", map_defaults.center_longitude)
        zoom = int(_float_arg(request, "zoom", map_defaults.zoom))
    except ValueError as e:
        return _json_response({"error": str(e)}, status=400, origin=origin)

    session.load_boundaries()
    outcome = session.load_events(criteria.time_window)

    events = session.events_for(outcome)
    if events is None:
        return _json_response(
            {"error": "Failed to fetch earthquake data"},
            status=502,
            origin=origin,
        )

    state = session.state
    render = build_render_set(events, criteria, state.boundaries)

    client = static_map_client or StaticMapClient(tile_url=map_defaults.tile_url)
    result = client.generate_map(
        create_map_config(
            latitude=latitude,
            longitude=longitude,
            zoom=zoom,
            width=map_defaults.image_width,
            height=map_defaults.image_height,
        ),
        create_event_layer(render.filtered),
        create_boundary_layer(list(state.boundaries or ())),
    )

    if not result.success:
        return _json_response(
            {"error": "Failed to render map", "detail": result.error},
            status=502,
            origin=origin,
        )

    response = Response(result.image_bytes, status=200, mimetype="image/png")
    for key, value in _cors_headers(origin).items():
        response.headers[key] = value
    return response
