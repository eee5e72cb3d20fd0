"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. MapSession owns the single
current MapState reference; every update builds a new snapshot in the
core and swaps it in here.
"""

import logging
import random
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from src.core.boundaries import assign_boundary_kinds, parse_boundaries
from src.core.config import Config
from src.core.earthquake import SeismicEvent, parse_events
from src.core.filters import TimeWindow
from src.core.geocode import normalize_query
from src.core.static_map import (
    CircleSpec,
    LineSpec,
    create_boundary_layer,
    create_event_layer,
)
from src.core.state import (
    FetchTicket,
    MapState,
    MapView,
    RenderSet,
    apply_boundaries,
    apply_events,
    apply_events_failure,
    apply_search_result,
    begin_events_fetch,
    begin_search,
    initial_state,
    record_error,
    record_search_failure,
    render_state,
    update_criteria,
)
from src.core.status import FailureKind, LoadError
from src.shell.boundaries_client import BoundariesClient
from src.shell.geocoder_client import GeocodeResult, NominatimClient
from src.shell.usgs_client import FeedResult, USGSFeedClient


logger = logging.getLogger(__name__)


@dataclass
class FetchOutcome:
    """Result of one event-feed fetch cycle.

    Attributes:
        ticket: The request this outcome belongs to
        applied: Whether the response replaced the current state
        events: Events parsed from the response, applied or not
        error: Load error if the fetch failed
    """
    ticket: FetchTicket
    applied: bool
    events: tuple[SeismicEvent, ...] = ()
    error: LoadError | None = None

    @property
    def event_count(self) -> int:
        return len(self.events)

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class SessionView:
    """Everything the presentation surfaces need for one render.

    Attributes:
        state: Snapshot the view was derived from
        render: Filtered events and report
        event_layer: Styled event circles
        boundary_layer: Styled boundary lines (empty until loaded)
    """
    state: MapState
    render: RenderSet
    event_layer: list[CircleSpec]
    boundary_layer: list[LineSpec]

    @property
    def notice(self) -> str | None:
        """User-facing message: a search notice, or the no-match message."""
        if self.state.notice:
            return self.state.notice
        if self.render.is_empty:
            return self.render.report.message
        return None


def _to_load_error(source: str, result: FeedResult) -> LoadError:
    return LoadError(
        source=source,
        kind=result.failure or FailureKind.NETWORK,
        message=result.error or "unknown error",
    )


class MapSession:
    """Coordinates feed loading, filtering, reporting and place search.

    This class wires together:
    - USGS feed client (event collection per time window)
    - Boundaries client (plate boundaries, once per session)
    - Nominatim client (place search)
    - Core functions (parsing, filtering, aggregation, styling)
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSFeedClient | None = None,
        boundaries_client: BoundariesClient | None = None,
        geocoder_client: NominatimClient | None = None,
        rng: random.Random | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        """Initialize session with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            boundaries_client: Boundaries client (created if not provided)
            geocoder_client: Geocoder client (created if not provided)
            rng: Randomness for boundary labels (unseeded if not provided)
            executor: Executor for background fetches (created on first use)
        """
        self.config = config
        self.usgs_client = usgs_client or USGSFeedClient(
            base_url=config.events_feed_base,
            timeout=config.request_timeout_seconds,
            user_agent=config.user_agent,
        )
        self.boundaries_client = boundaries_client or BoundariesClient(
            url=config.boundaries_url,
            timeout=config.request_timeout_seconds,
        )
        self.geocoder_client = geocoder_client or NominatimClient(
            url=config.geocoder_url,
            timeout=config.request_timeout_seconds,
            user_agent=config.user_agent,
        )
        self.rng = rng or random.Random()
        self._executor = executor
        self._closed = False
        self._boundaries_pending: threading.Event | None = None
        self._boundaries_loader: int | None = None
        # Guards compare-and-swap of the state reference; readers don't lock
        self._lock = threading.Lock()
        self._state = initial_state(
            config.default_criteria,
            MapView(
                latitude=config.map.center_latitude,
                longitude=config.map.center_longitude,
                zoom=config.map.zoom,
            ),
        )

    @property
    def state(self) -> MapState:
        """Current snapshot."""
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def _swap(self, transition) -> bool:
        """Apply a pure transition to the current state.

        The transition returns the new state, or None to leave the state
        unchanged (stale response). Returns True if a new state was installed.
        """
        with self._lock:
            if self._closed:
                return False
            new_state = transition(self._state)
            if new_state is None:
                return False
            self._state = new_state
            return True

    # ===== Event feed =====

    def begin_events_fetch(self, window: TimeWindow) -> FetchTicket:
        """Select a time window and issue the ticket for its fetch."""
        with self._lock:
            self._state, ticket = begin_events_fetch(self._state, window)
        return ticket

    def complete_events_fetch(self, ticket: FetchTicket, result: FeedResult) -> FetchOutcome:
        """Apply a fetch response, unless it has gone stale.

        Failures leave the last good collection in place.
        """
        if not result.success:
            error = _to_load_error("events", result)
            logger.error("Failed to fetch earthquakes: %s", error.describe())
            applied = self._swap(lambda s: apply_events_failure(s, ticket, error))
            return FetchOutcome(ticket=ticket, applied=applied, error=error)

        try:
            events = parse_events(result.data)
        except ValueError as e:
            error = LoadError("events", FailureKind.PARSE, str(e))
            logger.error("Failed to parse earthquake feed: %s", str(e))
            applied = self._swap(lambda s: apply_events_failure(s, ticket, error))
            return FetchOutcome(ticket=ticket, applied=applied, error=error)

        applied = self._swap(lambda s: apply_events(s, ticket, events))

        if applied:
            logger.info(
                "Loaded %d earthquakes for %s",
                len(events),
                ticket.window.token,
            )
        else:
            logger.info(
                "Discarded stale %s response (request %d)",
                ticket.window.token,
                ticket.sequence,
            )

        return FetchOutcome(ticket=ticket, applied=applied, events=tuple(events))

    def load_events(self, window: TimeWindow | None = None) -> FetchOutcome:
        """Select a window and fetch its feed synchronously.

        Args:
            window: Window to load; defaults to the current selection

        Returns:
            FetchOutcome describing what happened
        """
        ticket = self.begin_events_fetch(window or self._state.time_window)
        result = self.usgs_client.fetch_feed(ticket.window)
        return self.complete_events_fetch(ticket, result)

    def load_events_async(self, window: TimeWindow | None = None) -> Future:
        """Select a window and fetch its feed in the background.

        The selection changes immediately. If the user selects another
        window before this response arrives, the response is discarded.

        Returns:
            Future resolving to a FetchOutcome
        """
        ticket = self.begin_events_fetch(window or self._state.time_window)
        return self._get_executor().submit(self._fetch_and_complete, ticket)

    def _fetch_and_complete(self, ticket: FetchTicket) -> FetchOutcome:
        result = self.usgs_client.fetch_feed(ticket.window)
        return self.complete_events_fetch(ticket, result)

    def events_for(self, outcome: FetchOutcome) -> tuple[SeismicEvent, ...] | None:
        """Collection to answer a fetch with.

        A successful fetch answers with its own events even if another
        caller has since selected a different window. A failed fetch falls
        back to the last good collection for the same window.

        Returns:
            Events for outcome.ticket.window, or None if none are available
        """
        if outcome.success:
            return outcome.events

        state = self._state
        if state.events_window == outcome.ticket.window:
            return state.events
        return None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._closed:
            raise RuntimeError("MapSession is closed")
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="quake-fetch")
        return self._executor

    # ===== Plate boundaries =====

    @property
    def boundaries_loading(self) -> bool:
        """True while the first boundary load is in flight."""
        return self._boundaries_pending is not None

    def load_boundaries(self) -> bool:
        """Fetch and decorate plate boundaries, once per session.

        Boundary kinds are synthetic demo labels drawn here, once, and
        kept for the life of the session. Callers on other threads wait for
        an in-flight load; a re-entrant call from the loading thread returns
        False immediately (check boundaries_loading to tell it from a failure).

        Returns:
            True if boundaries are loaded after the call
        """
        with self._lock:
            if self._state.boundaries_loaded:
                return True
            pending = self._boundaries_pending
            if pending is None:
                pending = threading.Event()
                self._boundaries_pending = pending
                self._boundaries_loader = threading.get_ident()
                owner = True
            else:
                owner = False

        if not owner:
            if self._boundaries_loader == threading.get_ident():
                return False
            pending.wait(timeout=self.config.request_timeout_seconds)
            return self._state.boundaries_loaded

        try:
            return self._fetch_boundaries()
        finally:
            with self._lock:
                self._boundaries_pending = None
                self._boundaries_loader = None
            pending.set()

    def _fetch_boundaries(self) -> bool:
        result = self.boundaries_client.fetch_boundaries()

        if not result.success:
            error = _to_load_error("boundaries", result)
            logger.error("Failed to fetch plate boundaries: %s", error.describe())
            self._swap(lambda s: record_error(s, error))
            return False

        try:
            segments = parse_boundaries(result.data)
        except ValueError as e:
            error = LoadError("boundaries", FailureKind.PARSE, str(e))
            logger.error("Failed to parse plate boundaries: %s", str(e))
            self._swap(lambda s: record_error(s, error))
            return False

        decorated = assign_boundary_kinds(segments, self.rng)
        self._swap(lambda s: apply_boundaries(s, decorated))

        logger.info("Loaded %d plate boundary segments (synthetic labels)", len(decorated))
        return True

    # ===== Filters =====

    def update_filters(self, **changes) -> MapState:
        """Change client-side filters (magnitude, depth, place keyword).

        Time window changes go through load_events / load_events_async
        because they select a different feed.
        """
        self._swap(lambda s: update_criteria(s, **changes))
        return self._state

    # ===== Place search =====

    def search_place(self, query: str | None) -> GeocodeResult:
        """Resolve a place and recenter the map on it.

        Blank queries are a no-op. A miss sets the 'Location not found!'
        notice. Only the most recent search may change the view.
        """
        normalized = normalize_query(query)
        if normalized is None:
            return GeocodeResult(success=False, skipped=True)

        with self._lock:
            self._state, ticket = begin_search(self._state, normalized)

        result = self.geocoder_client.search(normalized)

        if result.success or result.not_found:
            self._swap(lambda s: apply_search_result(
                s,
                ticket,
                result.coordinates,
                self.config.map.search_zoom,
            ))
        else:
            logger.error("Place search failed: %s", result.error)
            error = LoadError("geocode", result.failure or FailureKind.NETWORK, result.error or "")
            self._swap(lambda s: record_search_failure(s, ticket, error))

        return result

    # ===== Views =====

    def view(self) -> SessionView:
        """Derive the render set and layers from the current snapshot."""
        state = self._state
        render = render_state(state, self.config.top_locations_limit)
        return SessionView(
            state=state,
            render=render,
            event_layer=create_event_layer(render.filtered),
            boundary_layer=create_boundary_layer(list(state.boundaries or ())),
        )

    def close(self) -> None:
        """Stop pending background work; late responses are discarded."""
        with self._lock:
            self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Map session closed")
