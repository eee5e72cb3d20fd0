"""Map state container - Pure functions.

MapState is the single, immutable snapshot the map and report render
from. Every change produces a new snapshot; the orchestrator swaps the
reference, so no reader ever sees a half-updated collection.

Fetch and search responses carry the ticket of the request that produced
them. A response whose ticket no longer matches the current selection is
stale and is discarded instead of applied.
"""

from dataclasses import dataclass, field, replace

from src.core.boundaries import BoundarySegment
from src.core.earthquake import SeismicEvent
from src.core.filters import FilterCriteria, TimeWindow, apply_filters
from src.core.geocode import NOT_FOUND_MESSAGE, Coordinates
from src.core.report import DEFAULT_TOP_LOCATIONS, NO_DATA, AggregateReport, NoData, summarize
from src.core.status import FailureKind, LoadError


@dataclass(frozen=True)
class FetchTicket:
    """Identifies one event-feed request.

    Attributes:
        window: Time window the request was issued for
        sequence: Monotonic request number within the session
    """
    window: TimeWindow
    sequence: int


@dataclass(frozen=True)
class SearchTicket:
    """Identifies one geocoder lookup."""
    query: str
    sequence: int


@dataclass(frozen=True)
class MapView:
    """Where the map is centered.

    Attributes:
        latitude: Center latitude
        longitude: Center longitude
        zoom: Zoom level
    """
    latitude: float
    longitude: float
    zoom: int


@dataclass(frozen=True)
class MapState:
    """Immutable snapshot of everything the map page shows.

    Attributes:
        criteria: Current filter selection (includes the time window)
        events: Event collection for events_window, replaced on each fetch
        events_window: Window the current collection was fetched for
        boundaries: Decorated boundary segments, None until loaded
        view: Current map center and zoom
        search_location: Last query that resolved
        notice: User-facing message (e.g. location not found)
        last_error: Most recent load failure, if any
        fetch_sequence: Last issued event-fetch sequence
        applied_sequence: Sequence of the response currently shown
        search_sequence: Last issued search sequence
    """
    criteria: FilterCriteria
    view: MapView
    events: tuple[SeismicEvent, ...] = ()
    events_window: TimeWindow | None = None
    boundaries: tuple[BoundarySegment, ...] | None = None
    search_location: str = ""
    notice: str | None = None
    last_error: LoadError | None = None
    fetch_sequence: int = 0
    applied_sequence: int = 0
    search_sequence: int = 0

    @property
    def time_window(self) -> TimeWindow:
        return self.criteria.time_window

    @property
    def boundaries_loaded(self) -> bool:
        return self.boundaries is not None


@dataclass(frozen=True)
class RenderSet:
    """Derived output for the presentation surfaces.

    Attributes:
        filtered: Events passing the current criteria, feed order
        report: Statistics report, or NO_DATA
    """
    filtered: list[SeismicEvent] = field(default_factory=list)
    report: AggregateReport | NoData = NO_DATA

    @property
    def is_empty(self) -> bool:
        return not self.filtered


def initial_state(criteria: FilterCriteria, view: MapView) -> MapState:
    """Create the state a new session starts from (nothing loaded)."""
    return MapState(criteria=criteria, view=view)


def begin_events_fetch(
    state: MapState,
    window: TimeWindow,
) -> tuple[MapState, FetchTicket]:
    """Select a time window and issue a ticket for its fetch.

    Pure function. The selection changes immediately; the collection is
    only replaced when a matching response is applied.
    """
    sequence = state.fetch_sequence + 1
    new_state = replace(
        state,
        criteria=state.criteria.with_changes(time_window=window),
        fetch_sequence=sequence,
    )
    return new_state, FetchTicket(window=window, sequence=sequence)


def is_stale(state: MapState, ticket: FetchTicket) -> bool:
    """True if a response for this ticket must not be applied.

    A response is stale when the user has since selected another window,
    or when a newer response has already been applied.
    """
    return ticket.window != state.time_window or ticket.sequence < state.applied_sequence


def apply_events(
    state: MapState,
    ticket: FetchTicket,
    events: list[SeismicEvent],
) -> MapState | None:
    """Replace the event collection with a fetched one.

    Pure function.

    Returns:
        New state, or None if the response is stale
    """
    if is_stale(state, ticket):
        return None

    return replace(
        state,
        events=tuple(events),
        events_window=ticket.window,
        applied_sequence=ticket.sequence,
        last_error=None,
    )


def apply_events_failure(
    state: MapState,
    ticket: FetchTicket,
    error: LoadError,
) -> MapState | None:
    """Record a failed fetch, keeping the last good collection.

    Pure function.

    Returns:
        New state, or None if the failure belongs to a stale request
    """
    if is_stale(state, ticket):
        return None

    return replace(state, last_error=error)


def apply_boundaries(state: MapState, boundaries: list[BoundarySegment]) -> MapState:
    """Install the decorated boundary collection.

    Pure function.
    """
    return replace(state, boundaries=tuple(boundaries))


def record_error(state: MapState, error: LoadError) -> MapState:
    return replace(state, last_error=error)


def update_criteria(state: MapState, **changes) -> MapState:
    """Change client-side filters.

    Pure function. The time window is not changed here; use
    begin_events_fetch so the selection and the fetch stay paired.

    Raises:
        ValueError: If time_window is passed
    """
    if "time_window" in changes:
        raise ValueError("time_window changes must go through begin_events_fetch")

    return replace(state, criteria=state.criteria.with_changes(**changes))


def begin_search(state: MapState, query: str) -> tuple[MapState, SearchTicket]:
    """Issue a ticket for a geocoder lookup.

    Pure function. Clears any previous notice.
    """
    sequence = state.search_sequence + 1
    new_state = replace(state, search_sequence=sequence, notice=None)
    return new_state, SearchTicket(query=query, sequence=sequence)


def apply_search_result(
    state: MapState,
    ticket: SearchTicket,
    coordinates: Coordinates | None,
    zoom: int,
) -> MapState | None:
    """Recenter the map on a resolved place, or post a not-found notice.

    Pure function.

    Returns:
        New state, or None if a newer search has been issued since
    """
    if ticket.sequence != state.search_sequence:
        return None

    if coordinates is None:
        return replace(
            state,
            notice=NOT_FOUND_MESSAGE,
            last_error=LoadError("geocode", FailureKind.NOT_FOUND, ticket.query),
        )

    return replace(
        state,
        view=MapView(latitude=coordinates.latitude, longitude=coordinates.longitude, zoom=zoom),
        search_location=ticket.query,
        notice=None,
    )


def record_search_failure(
    state: MapState,
    ticket: SearchTicket,
    error: LoadError,
) -> MapState | None:
    """Record a failed lookup, unless a newer search has been issued.

    Pure function.
    """
    if ticket.sequence != state.search_sequence:
        return None

    return replace(state, last_error=error)


def build_render_set(
    events: list[SeismicEvent] | tuple[SeismicEvent, ...],
    criteria: FilterCriteria,
    boundaries: list[BoundarySegment] | tuple[BoundarySegment, ...] | None,
    limit: int = DEFAULT_TOP_LOCATIONS,
) -> RenderSet:
    """Filter and summarize in one pass of the pipeline.

    Pure function. Always recomputed from scratch.
    """
    filtered = apply_filters(list(events), criteria)
    report = summarize(
        filtered,
        list(boundaries) if boundaries is not None else None,
        limit,
    )
    return RenderSet(filtered=filtered, report=report)


def render_state(state: MapState, limit: int = DEFAULT_TOP_LOCATIONS) -> RenderSet:
    """Derive the render set for a snapshot."""
    return build_render_set(state.events, state.criteria, state.boundaries, limit)
