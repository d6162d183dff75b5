"""Error taxonomy for the dashboard and its mapping to user-facing text.

Classification (what went wrong) and presentation (what the user reads) are
kept apart: `classify_*` returns an `ErrorKind`, `user_message` turns it into
a string.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Every failure the dashboard distinguishes."""
    LOCATION_PERMISSION_DENIED = "location_permission_denied"
    LOCATION_UNAVAILABLE = "location_unavailable"
    LOCATION_TIMEOUT = "location_timeout"
    LOCATION_UNSUPPORTED = "location_unsupported"
    NOT_FOUND = "not_found"
    FETCH_FAILED = "fetch_failed"
    SERVER_MISCONFIGURED = "server_misconfigured"
    INVALID_REQUEST = "invalid_request"


# W3C GeolocationPositionError codes
PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class ProxyRequestError(Exception):
    """A proxy call that did not yield a usable 2xx response.

    `status_code` is None for transport failures (connection refused, DNS,
    timeouts raised by requests).
    """

    def __init__(self, status_code: Optional[int], payload: Any = None, message: str = "") -> None:
        self.status_code = status_code
        self.payload = payload
        super().__init__(message or f"proxy request failed (status={status_code})")


class GeolocationError(Exception):
    """Raised by a position provider; `code` follows the W3C numbering."""

    def __init__(self, code: int, message: str = "") -> None:
        self.code = code
        super().__init__(message or f"geolocation failed (code={code})")


def classify_fetch_error(exc: BaseException) -> ErrorKind:
    """Map a fetch-chain exception onto the taxonomy.

    Anything that is not a proxy status error (transport failures wrapped with
    no status, pydantic validation errors on malformed payloads) is FETCH_FAILED.
    """
    if isinstance(exc, ProxyRequestError):
        if exc.status_code == 404:
            return ErrorKind.NOT_FOUND
        if exc.status_code == 400:
            return ErrorKind.INVALID_REQUEST
        if exc.status_code == 500 and _is_misconfiguration(exc.payload):
            return ErrorKind.SERVER_MISCONFIGURED
        return ErrorKind.FETCH_FAILED
    return ErrorKind.FETCH_FAILED


def _is_misconfiguration(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("error") == "Server API key not configured"


def classify_geolocation_error(code: int) -> ErrorKind:
    """Map a W3C geolocation error code; unknown codes count as denial."""
    if code == POSITION_UNAVAILABLE:
        return ErrorKind.LOCATION_UNAVAILABLE
    if code == TIMEOUT:
        return ErrorKind.LOCATION_TIMEOUT
    return ErrorKind.LOCATION_PERMISSION_DENIED


_MESSAGES = {
    ErrorKind.LOCATION_PERMISSION_DENIED: "Geolocation permission denied. Showing weather for a default city.",
    ErrorKind.LOCATION_UNAVAILABLE: "Location unavailable.",
    ErrorKind.LOCATION_TIMEOUT: "Location request timed out.",
    ErrorKind.LOCATION_UNSUPPORTED: "Geolocation is not supported by your browser.",
    ErrorKind.NOT_FOUND: "City not found. Please check the spelling.",
}

GENERIC_FETCH_MESSAGE = "An error occurred while fetching data."


def user_message(kind: ErrorKind) -> str:
    """Human-readable text for `kind`; fetch failures other than 404 share one message."""
    return _MESSAGES.get(kind, GENERIC_FETCH_MESSAGE)
