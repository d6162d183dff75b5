"""Run the current -> forecast -> air-quality fetch chain and publish view state."""
from __future__ import annotations

import threading
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from weather_dashboard.config import settings
from weather_dashboard.data_sources import WeatherDataSource
from weather_dashboard.errors import ProxyRequestError, classify_fetch_error, user_message
from weather_dashboard.forecast_views import Unit, chart_series, daily_view, hourly_view
from weather_dashboard.models import LocationQuery
from weather_dashboard.view_state import ViewState
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="orchestrator")

FETCH_ERRORS = (ProxyRequestError, ValidationError)


class WeatherOrchestrator:
    """
    Executes one fetch chain per resolved location.

    Current conditions are fetched first; their coordinates drive the forecast
    and air-quality calls, so a name query is geocoded by the first call.
    Forecast is required, air quality is optional. Each chain is stamped with a
    generation; a chain that finishes after a newer one started is discarded.
    """

    def __init__(self, data_source: WeatherDataSource, state: ViewState, *, tz: Optional[ZoneInfo] = None) -> None:
        self.data_source = data_source
        self.state = state
        self.tz = tz or ZoneInfo(settings.display_timezone)
        self._generation = 0
        self._lock = threading.Lock()

    def _begin(self) -> int:
        with self._lock:
            self._generation += 1
            self.state.loading = True
            self.state.error = ""
            return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def load(self, query: LocationQuery) -> bool:
        """Run the chain for `query`; True when its results were published."""
        generation = self._begin()
        logger.info("Fetch chain started", extra={"generation": generation, "query": repr(query)})

        try:
            current = self.data_source.fetch_current(query)
            lat, lon = current.coord.lat, current.coord.lon
            forecast = self.data_source.fetch_forecast(lat, lon)
        except FETCH_ERRORS as exc:
            return self._fail(generation, exc)
        except Exception as exc:
            # unexpected data-source bug; still ends the chain as a failure
            logger.exception("Fetch chain raised unexpectedly", extra={"generation": generation})
            return self._fail(generation, exc)

        aqi = self._fetch_aqi(lat, lon)

        with self._lock:
            if not self._is_current(generation):
                logger.debug("Discarding result of superseded chain", extra={"generation": generation})
                return False
            self.state.current = current
            self.state.coord = current.coord
            self.state.forecast = list(forecast.entries)
            self.state.hourly = hourly_view(forecast.entries)
            self.state.daily = daily_view(forecast.entries)
            self.state.chart = chart_series(forecast.entries, self.state.unit, self.tz)
            self.state.aqi = aqi
            self.state.loading = False

        logger.info(
            "Fetch chain succeeded",
            extra={"generation": generation, "location": current.name, "forecast_entries": len(forecast.entries)},
        )
        return True

    def _fail(self, generation: int, exc: BaseException) -> bool:
        kind = classify_fetch_error(exc)
        with self._lock:
            if not self._is_current(generation):
                logger.debug("Discarding failure of superseded chain", extra={"generation": generation})
                return False
            self.state.clear_weather()
            self.state.error = user_message(kind)
            self.state.loading = False
        logger.warning("Fetch chain failed", extra={"generation": generation, "kind": kind.value})
        return False

    def _fetch_aqi(self, lat: float, lon: float) -> Optional[int]:
        try:
            return self.data_source.fetch_air_quality(lat, lon).aqi
        except FETCH_ERRORS as exc:
            logger.warning("Air-quality fetch failed; omitting AQI", extra={"error": str(exc)})
        except Exception:
            logger.exception("Air-quality fetch raised unexpectedly; omitting AQI")
        return None

    def set_unit(self, unit: Unit) -> None:
        """Switch display unit and rebuild the chart from the stored forecast."""
        with self._lock:
            self.state.unit = unit
            if self.state.forecast:
                self.state.chart = chart_series(self.state.forecast, unit, self.tz)

    def toggle_unit(self) -> Unit:
        self.set_unit(self.state.unit.toggled())
        return self.state.unit
