import os

import uvicorn

from weather_dashboard.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def check_credential() -> None:
    """
    Warn when OPENWEATHER_API_KEY is absent. The proxy still starts, but every
    request will be answered with a 500 until the key is provided.
    """
    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY is not set; proxy requests will fail with HTTP 500")
        return
    logger.info("Provider credential loaded")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="weather_proxy")
    check_credential()

    uvicorn.run(
        "weather_dashboard.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
