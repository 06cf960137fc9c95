"""Models package exports."""

from src.models.request import LocateRequest, SearchRequest
from src.models.result import Failure, FetchResult, Success
from src.models.weather import (
    AlertCategory,
    AlertSeverity,
    AlertSummary,
    CacheStatus,
    Coordinates,
    CurrentWeather,
    DailyForecastEntry,
    DashboardLocation,
    DashboardSnapshot,
    DashboardState,
    GeocodeResult,
    HourlyForecastEntry,
    WeatherAlert,
    WeatherView,
)

__all__ = [
    "AlertCategory",
    "AlertSeverity",
    "AlertSummary",
    "CacheStatus",
    "Coordinates",
    "CurrentWeather",
    "DailyForecastEntry",
    "DashboardLocation",
    "DashboardSnapshot",
    "DashboardState",
    "Failure",
    "FetchResult",
    "GeocodeResult",
    "HourlyForecastEntry",
    "LocateRequest",
    "SearchRequest",
    "Success",
    "WeatherAlert",
    "WeatherView",
]
