"""User-facing dashboard actions wired to the resolver and the orchestrator."""
from __future__ import annotations

import threading
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo

from weather_dashboard.config import settings
from weather_dashboard.data_sources import ProxyWeatherClient, WeatherDataSource
from weather_dashboard.forecast_views import (
    Unit,
    aqi_label,
    current_display,
    daily_card,
    hourly_card,
    map_embed_url,
    rain_chance,
    suggestion_label,
)
from weather_dashboard.location_resolver import LocationResolver, PositionProvider, Resolution
from weather_dashboard.models import GeoCandidate
from weather_dashboard.orchestrator import WeatherOrchestrator
from weather_dashboard.view_state import ViewState
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="dashboard")


class WeatherDashboard:
    """One interactive session: a view state plus the actions that change it."""

    def __init__(
        self,
        data_source: Optional[WeatherDataSource] = None,
        position_provider: Optional[PositionProvider] = None,
        *,
        tz: Optional[ZoneInfo] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ) -> None:
        self.state = ViewState()
        self.data_source = data_source or ProxyWeatherClient()
        self.tz = tz or ZoneInfo(settings.display_timezone)
        self.resolver = LocationResolver(
            self.data_source, self.state, position_provider, timer_factory=timer_factory
        )
        self.orchestrator = WeatherOrchestrator(self.data_source, self.state, tz=self.tz)

    def _run(self, resolution: Optional[Resolution]) -> bool:
        if resolution is None:
            return False
        if resolution.query is None:
            self.state.error = resolution.advisory
            return False
        ok = self.orchestrator.load(resolution.query)
        # the chain clears the error slot on entry; re-post the advisory if the fallback loaded
        if ok and resolution.advisory:
            self.state.error = resolution.advisory
        return ok

    def use_my_location(self) -> bool:
        """Device position, or the default city with an advisory."""
        return self._run(self.resolver.resolve_from_device())

    def search(self, text: Optional[str] = None) -> bool:
        """Submit a typed city name (defaults to the current search text)."""
        return self._run(self.resolver.resolve_from_text(self.state.search_text if text is None else text))

    def on_input_change(self, text: str) -> None:
        self.resolver.autocomplete(text)

    def select_suggestion(self, candidate: GeoCandidate) -> bool:
        return self._run(self.resolver.resolve_from_suggestion(candidate))

    def toggle_unit(self) -> Unit:
        """Switch C/F; no network request is made."""
        return self.orchestrator.toggle_unit()

    def close(self) -> None:
        self.resolver.cancel_pending()

    def to_display(self) -> dict:
        """Snapshot of display strings for the rendering layer."""
        state = self.state
        unit = state.unit
        snapshot: dict = {
            "loading": state.loading,
            "error": state.error,
            "unit": unit.value,
            "search_text": state.search_text,
            "suggestions": [suggestion_label(s) for s in state.suggestions],
            "current": None,
            "hourly": [hourly_card(e, unit, self.tz) for e in state.hourly],
            "daily": [daily_card(e, unit, self.tz) for e in state.daily],
            "chart": [{"time": p.time_label, "temp": p.temperature} for p in state.chart],
        }
        if state.current is not None:
            current = current_display(state.current, unit, self.tz)
            if state.aqi is not None:
                current["air_quality"] = aqi_label(state.aqi)
            chance = rain_chance(state.forecast)
            if chance is not None:
                current["rain_chance"] = f"{chance}%"
            if state.coord is not None:
                current["map_url"] = map_embed_url(state.coord.lat, state.coord.lon)
            snapshot["current"] = current
        return snapshot


def main():
    """Manual helper: run one chain against a running proxy and print the snapshot."""
    import json
    import sys

    from utils.logging_utils import setup_logging

    setup_logging(level=settings.log_level, job_name="dashboard")
    dashboard = WeatherDashboard()
    city = " ".join(sys.argv[1:]) or settings.default_city
    dashboard.search(city)
    print(json.dumps(dashboard.to_display(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
