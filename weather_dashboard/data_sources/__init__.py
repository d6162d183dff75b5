"""Data sources the dashboard can pull weather from."""

from .base import CallableWeatherDataSource, WeatherDataSource
from .proxy_client import ProxyWeatherClient

__all__ = [
    "CallableWeatherDataSource",
    "ProxyWeatherClient",
    "WeatherDataSource",
]
