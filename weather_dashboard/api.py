"""HTTP proxy between the dashboard and the weather provider."""

from typing import Optional

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from .config import settings
from .upstream import UnknownEndpointError, forward
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")

router = APIRouter()


@router.get("/weather")
def proxy_weather(request: Request, endpoint: Optional[str] = Query(default=None)):
    """
    Forward `endpoint` plus all other query parameters to the provider.

    The provider key is appended server-side; the response body is the
    provider's, status included.
    """
    api_key = settings.openweather_api_key
    if not api_key:
        logger.error("OPENWEATHER_API_KEY is not configured")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Server API key not configured"},
        )

    params = {k: v for k, v in request.query_params.items() if k != "endpoint"}
    try:
        result = forward(endpoint, params, api_key=api_key)
    except UnknownEndpointError:
        logger.debug("Rejected proxy request", extra={"endpoint": endpoint})
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid endpoint"})

    logger.info("Proxied request", extra={"endpoint": endpoint, "status": result.status_code})
    return JSONResponse(status_code=result.status_code, content=result.body)
