"""Pure transforms from provider payloads to view-ready shapes."""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from weather_dashboard.models import CurrentConditions, ForecastEntry, GeoCandidate

KELVIN_OFFSET = 273.15

HOURLY_COUNT = 5
DAILY_STRIDE = 8  # 8 x 3-hour steps ~ same time next day
DAILY_COUNT = 5

ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"
MAP_EMBED_URL = "https://maps.google.com/maps?q={lat},{lon}&z=14&output=embed"

AQI_LABELS = {
    1: "Good",
    2: "Fair",
    3: "Moderate",
    4: "Poor",
    5: "Very Poor",
}


class Unit(str, Enum):
    """Display unit for temperatures; raw values stay in Kelvin."""
    CELSIUS = "C"
    FAHRENHEIT = "F"

    def toggled(self) -> "Unit":
        return Unit.FAHRENHEIT if self is Unit.CELSIUS else Unit.CELSIUS


@dataclass(frozen=True)
class ChartPoint:
    """One point of the temperature trend chart."""
    time_label: str
    temperature: int


def kelvin_to_celsius(kelvin: float) -> int:
    # floor, not round: matches the dashboard's historical output
    return math.floor(kelvin - KELVIN_OFFSET)


def kelvin_to_fahrenheit(kelvin: float) -> int:
    return math.floor((kelvin - KELVIN_OFFSET) * 9 / 5 + 32)


def convert_temperature(kelvin: float, unit: Unit) -> int:
    """Convert a provider temperature to the active display unit."""
    if unit is Unit.FAHRENHEIT:
        return kelvin_to_fahrenheit(kelvin)
    return kelvin_to_celsius(kelvin)


def aqi_label(aqi: Optional[int]) -> str:
    """Label for the provider's 1-5 air-quality index; anything else is Unknown."""
    return AQI_LABELS.get(aqi, "Unknown")


def hourly_view(entries: Sequence[ForecastEntry]) -> List[ForecastEntry]:
    """Nearest ~15 hours: the first five 3-hour steps, order untouched."""
    return list(entries[:HOURLY_COUNT])


def daily_view(entries: Sequence[ForecastEntry]) -> List[ForecastEntry]:
    """One entry per day (indexes 0, 8, 16, ...), at most five."""
    return list(entries[::DAILY_STRIDE][:DAILY_COUNT])


def _local(timestamp: int, tz: ZoneInfo) -> dt.datetime:
    return dt.datetime.fromtimestamp(timestamp, tz=tz)


def chart_label(timestamp: int, tz: ZoneInfo) -> str:
    """Short weekday plus 12-hour clock hour, e.g. "Mon 3 PM"."""
    local = _local(timestamp, tz)
    hour12 = local.hour % 12 or 12
    return f"{local:%a} {hour12} {local:%p}"


def chart_series(entries: Sequence[ForecastEntry], unit: Unit, tz: ZoneInfo) -> List[ChartPoint]:
    """Map the full forecast to chart points in `unit`."""
    return [
        ChartPoint(time_label=chart_label(e.dt, tz), temperature=convert_temperature(e.main.temp, unit))
        for e in entries
    ]


def format_clock(timestamp: int, tz: ZoneInfo) -> str:
    return f"{_local(timestamp, tz):%H:%M}"


def format_day(timestamp: int, tz: ZoneInfo) -> str:
    return f"{_local(timestamp, tz):%a %b %d %Y}"


def format_temperature(kelvin: float, unit: Unit) -> str:
    return f"{convert_temperature(kelvin, unit)}°{unit.value}"


def format_range(entry: ForecastEntry, unit: Unit) -> str:
    """Max/min pair for forecast cards, e.g. "21° / 14°"."""
    return f"{convert_temperature(entry.main.temp_max, unit)}° / {convert_temperature(entry.main.temp_min, unit)}°"


def icon_url(icon: Optional[str]) -> Optional[str]:
    if not icon:
        return None
    return ICON_URL.format(icon=icon)


def map_embed_url(lat: float, lon: float) -> str:
    return MAP_EMBED_URL.format(lat=lat, lon=lon)


def rain_chance(entries: Sequence[ForecastEntry]) -> Optional[int]:
    """Precipitation probability of the first step, in percent."""
    if not entries:
        return None
    # halves round up, e.g. 0.125 -> 13
    return math.floor(entries[0].pop * 100 + 0.5)


def suggestion_label(candidate: GeoCandidate) -> str:
    """Render as "name, state, country"; the state is omitted when missing or equal to the name."""
    if candidate.state and candidate.state != candidate.name:
        return f"{candidate.name}, {candidate.state}, {candidate.country}"
    return f"{candidate.name}, {candidate.country}"


def current_display(current: CurrentConditions, unit: Unit, tz: ZoneInfo) -> dict:
    """Display strings for the current-conditions panel."""
    return {
        "location": f"{current.name}, {current.sys.country}",
        "temperature": format_temperature(current.main.temp, unit),
        "description": current.condition.description,
        "icon_url": icon_url(current.condition.icon),
        "humidity": f"{current.main.humidity}%",
        "wind_speed": f"{current.wind.speed} m/s",
        "sunrise": format_clock(current.sys.sunrise, tz),
        "sunset": format_clock(current.sys.sunset, tz),
        "feels_like": format_temperature(current.main.feels_like, unit),
        "visibility": f"{current.visibility / 1000:.1f} km",
        "pressure": f"{current.main.pressure} hPa",
    }


def hourly_card(entry: ForecastEntry, unit: Unit, tz: ZoneInfo) -> dict:
    return {
        "time": format_clock(entry.dt, tz),
        "range": format_range(entry, unit),
        "description": entry.condition.description,
    }


def daily_card(entry: ForecastEntry, unit: Unit, tz: ZoneInfo) -> dict:
    return {
        "date": format_day(entry.dt, tz),
        "range": format_range(entry, unit),
        "description": entry.condition.description,
    }
