"""Turn user intent (device position, typed name, picked suggestion) into a location query."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol

from pydantic import ValidationError

from weather_dashboard.config import settings
from weather_dashboard.data_sources import WeatherDataSource
from weather_dashboard.errors import (
    ErrorKind,
    GeolocationError,
    ProxyRequestError,
    classify_geolocation_error,
    user_message,
)
from weather_dashboard.models import (
    Coordinates,
    CoordinateQuery,
    GeoCandidate,
    LocationQuery,
    TextQuery,
)
from weather_dashboard.view_state import ViewState
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="location_resolver")


class PositionProvider(Protocol):
    """Platform geolocation; raises GeolocationError on failure."""

    def get_current_position(self, *, timeout: float, maximum_age: float, high_accuracy: bool) -> Coordinates:
        ...


@dataclass
class Resolution:
    """Outcome of a resolve call.

    `query` is None when there is nothing to fetch. `advisory` carries a
    user-facing note (e.g. why the default city is shown).
    """
    query: Optional[LocationQuery]
    advisory: str = ""
    error_kind: Optional[ErrorKind] = None


class Debouncer:
    """Run at most one delayed call; each schedule() replaces the pending one."""

    def __init__(self, delay: float, timer_factory: Callable[..., Any] = threading.Timer) -> None:
        self.delay = delay
        self._timer_factory = timer_factory
        self._timer = None
        self._token = 0
        self._lock = threading.Lock()

    def schedule(self, fn: Callable[..., None], *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._token += 1
            timer = self._timer_factory(self.delay, self._fire, args=(self._token, fn, args))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._token += 1

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _fire(self, token: int, fn: Callable[..., None], args: tuple) -> None:
        with self._lock:
            # a timer that lost the race with cancel() must not run
            if token != self._token:
                return
            self._timer = None
        fn(*args)


class LocationResolver:
    """Produces one unambiguous location query per user trigger."""

    def __init__(
        self,
        data_source: WeatherDataSource,
        state: ViewState,
        position_provider: Optional[PositionProvider] = None,
        *,
        default_city: Optional[str] = None,
        geolocation_timeout: Optional[float] = None,
        debounce_seconds: Optional[float] = None,
        min_chars: Optional[int] = None,
        limit: Optional[int] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self.data_source = data_source
        self.state = state
        self.position_provider = position_provider
        self.default_city = default_city or settings.default_city
        self.geolocation_timeout = geolocation_timeout or settings.geolocation_timeout_seconds
        self.min_chars = settings.autocomplete_min_chars if min_chars is None else min_chars
        self.limit = limit or settings.autocomplete_limit
        self._debouncer = Debouncer(
            settings.autocomplete_debounce_seconds if debounce_seconds is None else debounce_seconds,
            timer_factory=timer_factory,
        )
        self._lookup_token = 0
        self._lock = threading.Lock()

    def _next_lookup_token(self) -> int:
        with self._lock:
            self._lookup_token += 1
            return self._lookup_token

    def resolve_from_device(self) -> Resolution:
        """
        Ask the platform for a fresh position. Failure is never fatal: the
        default city is returned together with an advisory explaining why.
        """
        if self.position_provider is None:
            logger.info("Geolocation not supported")
            kind = ErrorKind.LOCATION_UNSUPPORTED
            return Resolution(query=None, advisory=user_message(kind), error_kind=kind)

        try:
            position = self.position_provider.get_current_position(
                timeout=self.geolocation_timeout,
                maximum_age=0,
                high_accuracy=True,
            )
        except GeolocationError as exc:
            kind = classify_geolocation_error(exc.code)
            logger.warning("Geolocation failed; falling back to default city",
                           extra={"code": exc.code, "default_city": self.default_city})
            return Resolution(query=TextQuery(self.default_city), advisory=user_message(kind), error_kind=kind)

        return Resolution(query=CoordinateQuery(lat=position.lat, lon=position.lon))

    def resolve_from_text(self, text: str) -> Optional[Resolution]:
        """Typed city name, passed through unvalidated; None for empty input."""
        if not text or not text.strip():
            return None
        self.state.search_text = ""
        return Resolution(query=TextQuery(text.strip()))

    def autocomplete(self, text: str) -> None:
        """Handle a keystroke in the search box."""
        self.state.search_text = text
        token = self._next_lookup_token()
        if len(text) <= self.min_chars:
            self._debouncer.cancel()
            self.state.suggestions = []
            return
        self._debouncer.schedule(self._lookup, text, token)

    def _lookup(self, text: str, token: int) -> None:
        try:
            candidates: List[GeoCandidate] = self.data_source.geocode(text, limit=self.limit)
        except (ProxyRequestError, ValidationError) as exc:
            logger.debug("Autocomplete lookup failed", extra={"text": text, "error": str(exc)})
            candidates = []
        with self._lock:
            # input changed while the request was in flight
            if token != self._lookup_token:
                logger.debug("Discarding stale autocomplete result", extra={"text": text})
                return
            self.state.suggestions = list(candidates[: self.limit])

    def resolve_from_suggestion(self, candidate: GeoCandidate) -> Resolution:
        """Picked suggestion -> coordinate query; the suggestion list is closed."""
        self.cancel_pending()
        self.state.search_text = f"{candidate.name}, {candidate.country}"
        self.state.suggestions = []
        return Resolution(query=CoordinateQuery(lat=candidate.lat, lon=candidate.lon))

    def cancel_pending(self) -> None:
        """Drop the scheduled lookup and any result still in flight."""
        self._next_lookup_token()
        self._debouncer.cancel()
