"""Dashboard-side client for the weather proxy endpoint."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from weather_dashboard.config import settings
from weather_dashboard.errors import ProxyRequestError
from weather_dashboard.models import (
    AirQualityReport,
    CurrentConditions,
    ForecastSeries,
    GeoCandidate,
    LocationQuery,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="proxy_client")

session = requests.Session()


class ProxyWeatherClient:
    """Calls `<proxy_url>?endpoint=...` and parses the provider payloads.

    No retries and no timeout: a chained fetch waits as long as the proxy
    does, which in turn is bounded by the proxy's upstream timeout.
    """

    def __init__(self, proxy_url: Optional[str] = None) -> None:
        self.proxy_url = (proxy_url or settings.proxy_url).rstrip("/")

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        query = {"endpoint": endpoint, **params}
        try:
            resp = session.get(self.proxy_url, params=query)
        except requests.RequestException as exc:
            logger.warning("Proxy unreachable", extra={"endpoint": endpoint, "error": str(exc)})
            raise ProxyRequestError(None, message=str(exc)) from exc

        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            try:
                payload = resp.json()
            except ValueError:
                payload = None
            logger.info("Proxy returned an error status",
                        extra={"endpoint": endpoint, "status": resp.status_code})
            raise ProxyRequestError(resp.status_code, payload) from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise ProxyRequestError(resp.status_code, message="proxy returned a non-JSON body") from exc

    def fetch_current(self, query: LocationQuery) -> CurrentConditions:
        """Current conditions by city name or coordinates."""
        return CurrentConditions.model_validate(self._get("weather", query.params()))

    def fetch_forecast(self, lat: float, lon: float) -> ForecastSeries:
        return ForecastSeries.model_validate(self._get("forecast", {"lat": lat, "lon": lon}))

    def fetch_air_quality(self, lat: float, lon: float) -> AirQualityReport:
        return AirQualityReport.model_validate(self._get("air_pollution", {"lat": lat, "lon": lon}))

    def geocode(self, text: str, limit: int = 5) -> List[GeoCandidate]:
        """Direct geocoding used for autocomplete; the result is capped at `limit`."""
        data = self._get("geo", {"q": text, "limit": limit})
        return [GeoCandidate.model_validate(item) for item in (data or [])][:limit]
