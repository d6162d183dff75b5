"""Interfaces and helpers for dashboard data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Protocol

from weather_dashboard.models import (
    AirQualityReport,
    CurrentConditions,
    ForecastSeries,
    GeoCandidate,
    LocationQuery,
)


class WeatherDataSource(Protocol):
    """Anything that can answer the dashboard's four lookups."""

    def fetch_current(self, query: LocationQuery) -> CurrentConditions:
        """Return current conditions for a name or coordinate query."""
        ...

    def fetch_forecast(self, lat: float, lon: float) -> ForecastSeries:
        """Return the 3-hourly forecast series."""
        ...

    def fetch_air_quality(self, lat: float, lon: float) -> AirQualityReport:
        """Return the latest air-quality samples."""
        ...

    def geocode(self, text: str, limit: int = 5) -> List[GeoCandidate]:
        """Return up to `limit` candidate locations for `text`."""
        ...


@dataclass
class CallableWeatherDataSource(WeatherDataSource):
    """Wrap four callables so tests and alternate backends can swap them."""

    current: Callable[..., CurrentConditions]
    forecast: Callable[..., ForecastSeries]
    air_quality: Callable[..., AirQualityReport]
    geo: Callable[..., List[GeoCandidate]]

    def fetch_current(self, query: LocationQuery) -> CurrentConditions:
        return self.current(query)

    def fetch_forecast(self, lat: float, lon: float) -> ForecastSeries:
        return self.forecast(lat, lon)

    def fetch_air_quality(self, lat: float, lon: float) -> AirQualityReport:
        return self.air_quality(lat, lon)

    def geocode(self, text: str, limit: int = 5) -> List[GeoCandidate]:
        return self.geo(text, limit)
