"""Text formatting - Pure functions.

This module formats events, boundaries and reports into the text the map
surface shows: popups, tooltips, the filters-applied summary and the
report panel. All functions are pure with no side effects.
"""

from datetime import timezone

from src.core.boundaries import BoundaryKind, BoundarySegment
from src.core.earthquake import SeismicEvent
from src.core.filters import FilterCriteria


def format_magnitude(magnitude: float | None) -> str:
    """Format a magnitude for display; unrated events show 'n/a'."""
    if magnitude is None:
        return "n/a"
    return f"{magnitude:g}"


def format_depth(depth_km: float) -> str:
    return f"{depth_km:g} km"


def format_event_time(event: SeismicEvent, tz: timezone = timezone.utc) -> str:
    """Format the event time in the given timezone (UTC by default)."""
    return event.time.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S %Z")


def format_event_tooltip(event: SeismicEvent) -> str:
    """Hover text for an event marker.

    Pure function.
    """
    return f"{event.place} - Mag: {format_magnitude(event.magnitude)}"


def format_event_popup(event: SeismicEvent) -> str:
    """Popup HTML for an event marker.

    Pure function.
    """
    return (
        f"<b>{event.place}</b><br/>"
        f"Magnitude: {format_magnitude(event.magnitude)}<br/>"
        f"Depth: {format_depth(event.depth_km)}<br/>"
        f"Time: {format_event_time(event)}"
    )


def format_boundary_tooltip(segment: BoundarySegment) -> str:
    """Hover text for a boundary line.

    Pure function.
    """
    kind = segment.boundary_kind.value if segment.boundary_kind else "Unclassified"
    return f"{kind} Plate Boundary"


def format_filters_applied(
    criteria: FilterCriteria,
    search_location: str = "",
) -> list[str]:
    """Describe the active filters, one line per filter.

    Pure function.

    Args:
        criteria: Current filter criteria
        search_location: Last place searched, if any

    Returns:
        Lines such as 'Magnitude: 0 - 10'
    """
    min_mag, max_mag = criteria.magnitude_range
    min_depth, max_depth = criteria.depth_range_km

    return [
        f"Magnitude: {min_mag:g} - {max_mag:g}",
        f"Depth: {min_depth:g} km - {max_depth:g} km",
        f"Time Range: {criteria.time_window.label}",
        f"Search Location: {search_location or 'Not specified'}",
        f"Place Filter: {criteria.place_keyword or 'None'}",
    ]


def format_boundary_activity(boundary_counts: dict[BoundaryKind, int] | None) -> list[str]:
    """One line per boundary kind, or nothing if boundaries aren't loaded."""
    if boundary_counts is None:
        return []
    return [
        f"{kind.value} Plates: {count} boundaries highlighted"
        for kind, count in boundary_counts.items()
    ]


def format_report_text(
    report,
    criteria: FilterCriteria,
    search_location: str = "",
) -> str:
    """Render the report panel as plain text.

    Pure function.

    Args:
        report: AggregateReport or NO_DATA
        criteria: Filters that produced the report
        search_location: Last place searched, if any

    Returns:
        Multi-line report text
    """
    if not report:
        return report.message

    lines = ["🌎 Earthquake Report & Map Insights", "", "Filters Applied:"]
    lines.extend(f"- {line}" for line in format_filters_applied(criteria, search_location))

    lines.extend([
        "",
        "Summary:",
        f"We found {report.total} earthquakes on the map.",
        (
            f"- {report.strong} strong (≥5), {report.moderate} moderate (3-5), "
            f"{report.minor} minor (<3)."
        ),
        (
            f"- Average magnitude: {report.formatted_avg_magnitude}, "
            f"strongest: {format_magnitude(report.max_magnitude)}, "
            f"weakest: {format_magnitude(report.min_magnitude)}."
        ),
        (
            f"- Depths range: {format_depth(report.min_depth_km)} (shallowest) - "
            f"{format_depth(report.max_depth_km)} (deepest)."
        ),
    ])

    if report.unrated:
        lines.append(f"- {report.unrated} events have no reported magnitude.")

    lines.extend([
        "",
        "Top Affected Locations:",
        ", ".join(report.formatted_top_locations),
    ])

    activity = format_boundary_activity(report.boundary_counts)
    if activity:
        lines.extend(["", "Tectonic Plate Activity:"])
        lines.extend(f"- {line}" for line in activity)

    return "\n".join(lines)
