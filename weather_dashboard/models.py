"""Pydantic models for the provider payloads the dashboard consumes.

Only the fields the dashboard reads are declared; anything else the provider
sends is ignored. Temperatures stay in Kelvin (provider default units).

The location query types at the bottom are what the resolver hands to the
orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Latitude/longitude pair as returned in `coord`."""
    lat: float
    lon: float


class Condition(BaseModel):
    """One entry of the provider's `weather` array."""
    description: str = ""
    icon: Optional[str] = None


class CurrentMain(BaseModel):
    temp: float
    feels_like: float
    humidity: int
    pressure: int


class SunTimes(BaseModel):
    country: str = ""
    sunrise: int
    sunset: int


class Wind(BaseModel):
    speed: float


class CurrentConditions(BaseModel):
    """Snapshot from the `weather` endpoint."""
    coord: Coordinates
    name: str
    sys: SunTimes
    main: CurrentMain
    weather: List[Condition] = Field(min_length=1)
    wind: Wind
    visibility: int = 0

    @property
    def condition(self) -> Condition:
        """Primary weather condition."""
        return self.weather[0]


class ForecastMain(BaseModel):
    temp: float
    temp_min: float
    temp_max: float


class ForecastEntry(BaseModel):
    """One 3-hour step of the `forecast` endpoint."""
    dt: int
    main: ForecastMain
    weather: List[Condition] = Field(min_length=1)
    pop: float = 0.0

    @property
    def condition(self) -> Condition:
        return self.weather[0]


class ForecastSeries(BaseModel):
    """Forecast entries in provider order (never re-sorted)."""
    model_config = ConfigDict(populate_by_name=True)

    entries: List[ForecastEntry] = Field(default_factory=list, validation_alias="list")


class AirQualityMain(BaseModel):
    aqi: int


class AirQualitySample(BaseModel):
    main: AirQualityMain


class AirQualityReport(BaseModel):
    """Payload of the `air_pollution` endpoint."""
    model_config = ConfigDict(populate_by_name=True)

    samples: List[AirQualitySample] = Field(default_factory=list, validation_alias="list")

    @property
    def aqi(self) -> Optional[int]:
        """AQI of the most recent sample, or None when the provider sent none."""
        if not self.samples:
            return None
        return self.samples[0].main.aqi


class GeoCandidate(BaseModel):
    """Autocomplete suggestion from the geocoding endpoint."""
    name: str
    country: str
    state: Optional[str] = None
    lat: float
    lon: float


@dataclass(frozen=True)
class TextQuery:
    """Free-text city name; the provider geocodes it."""
    name: str

    def params(self) -> Dict[str, str]:
        return {"q": self.name}


@dataclass(frozen=True)
class CoordinateQuery:
    """Explicit coordinates from the device or a picked suggestion."""
    lat: float
    lon: float

    def params(self) -> Dict[str, str]:
        return {"lat": str(self.lat), "lon": str(self.lon)}


LocationQuery = Union[TextQuery, CoordinateQuery]
