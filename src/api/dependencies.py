"""FastAPI dependencies for the objects built once at application start."""

from fastapi import Request

from src.services.dashboard_service import DashboardSession
from src.services.weather_client import WeatherClient
from src.services.weather_service import WeatherService


def get_weather_client(request: Request) -> WeatherClient:
    """Shared upstream client from application state."""
    return request.app.state.weather_client


def get_weather_service(request: Request) -> WeatherService:
    """Shared weather service (and its cache) from application state."""
    return request.app.state.weather_service


def get_dashboard_session(request: Request) -> DashboardSession:
    """The dashboard session from application state."""
    return request.app.state.dashboard_session
