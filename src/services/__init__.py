"""Services package exports."""

from src.services.cache_service import ResponseCache
from src.services.dashboard_service import DashboardSession
from src.services.logging_service import configure_logging, get_logger
from src.services.weather_client import WeatherClient
from src.services.weather_service import WeatherService

__all__ = [
    "DashboardSession",
    "ResponseCache",
    "WeatherClient",
    "WeatherService",
    "configure_logging",
    "get_logger",
]
