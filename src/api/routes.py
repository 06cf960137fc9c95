"""API route definitions for the dashboard, cache and health endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_dashboard_session, get_weather_service
from src.models.request import LocateRequest, SearchRequest
from src.models.weather import AlertSummary, CacheStatus, DashboardState
from src.services.dashboard_service import CoordinateLocator, DashboardSession
from src.services.errors import ConfigurationError, NotFoundError, WeatherServiceError
from src.services.normalization import summarize_alerts
from src.services.weather_service import WeatherService

router = APIRouter()


@router.get("/health")
async def health_check(
    service: WeatherService = Depends(get_weather_service),
) -> dict:
    """Health check endpoint.

    Returns:
        Status, timestamp in ISO8601 format and API key presence
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "weather_api_configured": bool(service.client.settings.openweathermap_api_key),
    }


@router.get("/api/dashboard", response_model=DashboardState)
async def get_dashboard(
    session: DashboardSession = Depends(get_dashboard_session),
) -> DashboardState:
    """Current dashboard state; loads the default location on first use."""
    if session.snapshot is None and not session.loading:
        await session.locate_then_fetch()
    return session.state()


@router.post("/api/dashboard/locate", response_model=DashboardState)
async def locate_dashboard(
    request: LocateRequest,
    session: DashboardSession = Depends(get_dashboard_session),
) -> DashboardState:
    """Load the dashboard for reported device coordinates, else the default."""
    await session.locate_then_fetch(CoordinateLocator(request.lat, request.lon))
    return session.state()


@router.post("/api/dashboard/search", response_model=DashboardState)
async def search_dashboard(
    request: SearchRequest,
    session: DashboardSession = Depends(get_dashboard_session),
):
    """Show a place by name.

    On failure responds with `{"error": ...}` (404 unknown place, 500
    configuration, 502 provider failure); the displayed data is unchanged.
    """
    try:
        await session.search(request.query)
    except WeatherServiceError as e:
        if isinstance(e, NotFoundError):
            status_code = 404
        elif isinstance(e, ConfigurationError):
            status_code = 500
        else:
            status_code = 502
        message = f"Failed to get weather for {request.query.strip()}: {e}"
        return JSONResponse(status_code=status_code, content={"error": message})
    return session.state()


@router.get("/api/dashboard/alerts/summary", response_model=AlertSummary)
async def alert_summary(
    session: DashboardSession = Depends(get_dashboard_session),
) -> AlertSummary:
    """Active alert counts per tier for the displayed location."""
    if session.snapshot is None:
        return AlertSummary()
    return summarize_alerts(session.snapshot.alerts)


@router.get("/api/cache", response_model=CacheStatus)
async def cache_status(
    service: WeatherService = Depends(get_weather_service),
) -> CacheStatus:
    return service.cache_status()


@router.delete("/api/cache", response_model=CacheStatus)
async def clear_cache(
    service: WeatherService = Depends(get_weather_service),
) -> CacheStatus:
    """Drop every cached payload."""
    service.clear_cache()
    return service.cache_status()
