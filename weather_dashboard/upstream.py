"""Forward proxy requests to the OpenWeatherMap APIs with the server-held key."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests

from weather_dashboard.config import settings
from utils.logging_utils import get_tagged_logger, mask_url_secrets

logger = get_tagged_logger(__name__, tag="upstream")

session = requests.Session()

# Proxy `endpoint` value -> upstream path under the provider base URL.
ENDPOINT_ROUTES: Dict[str, str] = {
    "weather": "/data/2.5/weather",
    "forecast": "/data/2.5/forecast",
    "air_pollution": "/data/2.5/air_pollution",
    "geo": "/geo/1.0/direct",
}

GENERIC_ERROR_BODY = {"error": "Error fetching data"}


class UnknownEndpointError(ValueError):
    """Raised when a proxy request names no endpoint or an unsupported one."""


@dataclass
class UpstreamResult:
    """Status code and body to hand back to the dashboard unchanged."""
    status_code: int
    body: Any


def upstream_url(endpoint: Optional[str], base_url: Optional[str] = None) -> str:
    """Resolve a proxy endpoint name to its full upstream URL."""
    path = ENDPOINT_ROUTES.get(endpoint or "")
    if path is None:
        raise UnknownEndpointError(endpoint)
    return f"{(base_url or settings.openweather_base_url).rstrip('/')}{path}"


def forward(
    endpoint: Optional[str],
    params: Mapping[str, str],
    *,
    api_key: str,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> UpstreamResult:
    """
    Call the upstream route for `endpoint`, passing `params` through untouched
    and appending `appid`.

    Upstream HTTP errors come back as a result mirroring the upstream status and
    body (JSON when it parses, the raw text otherwise); transport failures and
    non-JSON success bodies become a 500 with a generic body. Unknown endpoints
    raise `UnknownEndpointError`.
    """
    url = upstream_url(endpoint, base_url)
    query = {**params, "appid": api_key}

    try:
        resp = session.get(url, params=query, timeout=timeout or settings.upstream_timeout_seconds)
    except requests.RequestException as exc:
        logger.error("Upstream request failed", extra={"endpoint": endpoint, "error": str(exc)})
        return UpstreamResult(status_code=500, body=GENERIC_ERROR_BODY)

    logger.debug("Upstream responded",
                 extra={"url": mask_url_secrets(getattr(resp, "url", url) or url), "status": resp.status_code})

    try:
        resp.raise_for_status()
    except requests.HTTPError:
        logger.warning("Upstream returned an error status",
                       extra={"endpoint": endpoint, "status": resp.status_code})
        try:
            body = resp.json()
        except ValueError:
            # plain-text error pages pass through as-is
            body = resp.text or GENERIC_ERROR_BODY
        return UpstreamResult(status_code=resp.status_code, body=body)

    try:
        return UpstreamResult(status_code=200, body=resp.json())
    except ValueError:
        logger.error("Upstream returned a non-JSON body", extra={"endpoint": endpoint})
        return UpstreamResult(status_code=500, body=GENERIC_ERROR_BODY)
