"""Single in-memory container for everything the dashboard renders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from weather_dashboard.forecast_views import ChartPoint, Unit
from weather_dashboard.models import Coordinates, CurrentConditions, ForecastEntry, GeoCandidate


@dataclass
class ViewState:
    """Session view state.

    The orchestrator owns the weather fields, loading and error; the location
    resolver owns `suggestions` and `search_text`. Nothing here is persisted.
    """
    current: Optional[CurrentConditions] = None
    coord: Optional[Coordinates] = None
    forecast: List[ForecastEntry] = field(default_factory=list)
    hourly: List[ForecastEntry] = field(default_factory=list)
    daily: List[ForecastEntry] = field(default_factory=list)
    chart: List[ChartPoint] = field(default_factory=list)
    aqi: Optional[int] = None
    unit: Unit = Unit.CELSIUS
    error: str = ""
    loading: bool = False
    suggestions: List[GeoCandidate] = field(default_factory=list)
    search_text: str = ""

    def clear_weather(self) -> None:
        """Drop every fetched and derived field together."""
        self.current = None
        self.coord = None
        self.forecast = []
        self.hourly = []
        self.daily = []
        self.chart = []
        self.aqi = None

    @property
    def has_weather(self) -> bool:
        return self.current is not None
