"""Same-origin proxy to the weather provider.

Injects the server-held API key and returns the raw provider JSON. Provider
error text is never passed through to the browser.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.api.dependencies import get_weather_client
from src.models.weather import WeatherView
from src.services.errors import ConfigurationError, WeatherServiceError
from src.services.weather_client import WeatherClient

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["weather-proxy"])

VALID_TYPES = ", ".join(f'"{view.value}"' for view in WeatherView)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/weather")
async def proxy_weather(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    view_type: str = Query("current", alias="type"),
    client: WeatherClient = Depends(get_weather_client),
):
    """Forward a coordinate query to the provider.

    Returns:
        Raw provider JSON, or `{"error": ...}` with status 400 or 500
    """
    if lat is None or lon is None:
        return _error(400, "Latitude and longitude are required")

    try:
        client.require_api_key()
    except ConfigurationError:
        return _error(500, "OpenWeatherMap API key is not configured")

    try:
        view = WeatherView(view_type)
    except ValueError:
        return _error(400, f"Invalid type parameter. Use {VALID_TYPES}")

    try:
        return await client.fetch_view(view, lat, lon)
    except WeatherServiceError as e:
        logger.error(
            "weather_proxy_failed",
            view=view.value,
            error=str(e),
            error_type=type(e).__name__,
        )
        return _error(500, "Failed to fetch weather data")
