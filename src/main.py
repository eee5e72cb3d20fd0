"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that loads configuration, keeps one MapSession per
warm instance, and routes requests to the API handlers.
"""

import logging
import os

import functions_framework
from flask import Request, Response

from src import api_handler
from src.core.config import validate_config
from src.orchestrator import MapSession
from src.shell.config_loader import load_config, load_config_from_env


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# One session per instance so plate boundaries load once
_session: MapSession | None = None

ROUTES = {
    "/events": api_handler.get_events,
    "/boundaries": api_handler.get_boundaries,
    "/geocode": api_handler.search_place,
    "/map.png": api_handler.get_map_image,
}


def _get_config():
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        config = load_config(config_path)
    elif os.environ.get("QUAKE_TIME_WINDOW"):
        # Simple env-based config
        config = load_config_from_env()
    else:
        # Try default config path
        config = load_config()

    validation = validate_config(config)
    for error in validation.errors:
        log = logger.warning if error.severity == "warning" else logger.error
        log("Config %s: %s", error.field, error.message)

    if not validation.valid:
        raise ValueError(
            "Invalid configuration: "
            + "; ".join(e.message for e in validation.critical_errors)
        )

    return config


def get_session() -> MapSession:
    """Get or create the instance-wide map session."""
    global _session
    if _session is None or _session.closed:
        _session = MapSession(_get_config())
    return _session


@functions_framework.http
def quake_atlas(request: Request) -> Response:
    """HTTP Cloud Function entry point.

    Routes by path:
        /events      Filtered events, map layer and report
        /boundaries  Plate boundary layer
        /geocode     Place search
        /map.png     Static map snapshot

    Args:
        request: Flask request object

    Returns:
        Flask response
    """
    if request.method == "OPTIONS":
        return api_handler.preflight_response(request)

    path = request.path.rstrip("/") or "/events"
    handler = ROUTES.get(path)

    if handler is None:
        return api_handler._json_response(
            {"error": f"Unknown path: {path}", "available": sorted(ROUTES)},
            status=404,
            origin=request.headers.get("Origin"),
        )

    try:
        return handler(request, get_session())
    except Exception as e:
        logger.exception("Unexpected error handling %s", path)
        return api_handler._json_response(
            {"status": "error", "message": str(e)},
            status=500,
            origin=request.headers.get("Origin"),
        )


# For local testing
if __name__ == "__main__":
    import sys

    from src.core.formatter import format_report_text

    print("Loading earthquake map data locally...")

    session = get_session()
    session.load_boundaries()
    outcome = session.load_events()

    if not outcome.success:
        print(f"Error: {outcome.error.describe()}")
        sys.exit(1)

    view = session.view()
    print()
    print(format_report_text(view.render.report, view.state.criteria))
    session.close()
