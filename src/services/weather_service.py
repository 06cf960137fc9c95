"""Weather data access: cache, upstream fetch, normalization and fallback."""

import random
from typing import Callable, Optional, TypeVar

import structlog

from src.models.result import Failure, FetchResult, Success
from src.models.weather import (
    CacheStatus,
    CurrentWeather,
    DailyForecastEntry,
    GeocodeResult,
    HourlyForecastEntry,
    WeatherAlert,
    WeatherView,
)
from src.services.cache_service import ResponseCache
from src.services.errors import NotFoundError
from src.services.fallback_service import (
    fallback_alerts,
    fallback_current,
    fallback_daily,
    fallback_hourly,
)
from src.services.normalization import (
    normalize_alerts,
    normalize_current,
    normalize_daily,
    normalize_hourly,
)
from src.services.weather_client import WeatherClient

logger = structlog.get_logger(__name__)

T = TypeVar("T")

CACHE_ENDPOINT = "weather"


class WeatherService:
    """Serves normalized view models for a location.

    The `fetch_*` methods return a `FetchResult`; the `get_*` methods convert
    any failure into fallback data and never raise.
    """

    def __init__(
        self,
        client: WeatherClient,
        cache: ResponseCache,
        rng: Optional[random.Random] = None,
    ):
        self.client = client
        self.cache = cache
        self.rng = rng

    async def _fetch_with_cache(
        self, view: WeatherView, lat: float, lon: float
    ) -> FetchResult[dict]:
        """Return the raw payload for a view, from cache when still fresh."""
        params = {"lat": lat, "lon": lon, "type": view.value}
        cached = self.cache.get(CACHE_ENDPOINT, params)
        if cached is not None:
            return Success(cached)

        try:
            data = await self.client.fetch_view(view, lat, lon)
        except Exception as e:
            logger.warning(
                "weather_fetch_failed",
                view=view.value,
                lat=lat,
                lon=lon,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Failure(e)

        self.cache.put(CACHE_ENDPOINT, params, data)
        return Success(data)

    def _or_fallback(
        self, result: FetchResult[T], view_model: str, fallback: Callable[[], T]
    ) -> T:
        def _fallback(error: Exception) -> T:
            logger.info(
                "weather_fallback_used",
                view_model=view_model,
                error_type=type(error).__name__,
            )
            return fallback()

        return result.unwrap_or_else(_fallback)

    async def fetch_current_weather(self, lat: float, lon: float) -> FetchResult[CurrentWeather]:
        result = await self._fetch_with_cache(WeatherView.CURRENT, lat, lon)
        return result.map(normalize_current)

    async def fetch_hourly_forecast(
        self, lat: float, lon: float
    ) -> FetchResult[list[HourlyForecastEntry]]:
        result = await self._fetch_with_cache(WeatherView.FORECAST, lat, lon)
        return result.map(normalize_hourly)

    async def fetch_daily_forecast(
        self, lat: float, lon: float
    ) -> FetchResult[list[DailyForecastEntry]]:
        result = await self._fetch_with_cache(WeatherView.ONECALL, lat, lon)
        return result.map(normalize_daily)

    async def fetch_weather_alerts(
        self, lat: float, lon: float
    ) -> FetchResult[list[WeatherAlert]]:
        result = await self._fetch_with_cache(WeatherView.ONECALL, lat, lon)
        return result.map(normalize_alerts)

    async def get_current_weather(self, lat: float, lon: float) -> CurrentWeather:
        """Get current conditions, or the fixed placeholder on failure."""
        result = await self.fetch_current_weather(lat, lon)
        return self._or_fallback(result, "current", lambda: fallback_current(lat, lon))

    async def get_hourly_forecast(self, lat: float, lon: float) -> list[HourlyForecastEntry]:
        """Get up to 24 hourly entries, or random placeholders on failure."""
        result = await self.fetch_hourly_forecast(lat, lon)
        return self._or_fallback(result, "hourly", lambda: fallback_hourly(self.rng))

    async def get_daily_forecast(self, lat: float, lon: float) -> list[DailyForecastEntry]:
        """Get up to 7 daily entries, or random placeholders on failure."""
        result = await self.fetch_daily_forecast(lat, lon)
        return self._or_fallback(result, "daily", lambda: fallback_daily(self.rng))

    async def get_weather_alerts(self, lat: float, lon: float) -> list[WeatherAlert]:
        """Get alerts, or an empty list on failure."""
        result = await self.fetch_weather_alerts(lat, lon)
        return self._or_fallback(result, "alerts", fallback_alerts)

    async def resolve_city(self, city_name: str) -> GeocodeResult:
        """Geocode a place name to its best match.

        Raises:
            NotFoundError: If the name has no match
            UpstreamError: If the geocoding call fails
            ConfigurationError: If no API key is configured
        """
        matches = await self.client.geocode(city_name, limit=1)
        if not matches:
            logger.info("geocoding_no_match", query=city_name)
            raise NotFoundError(city_name)
        return matches[0]

    async def get_weather_by_city(self, city_name: str) -> tuple[CurrentWeather, GeocodeResult]:
        """Geocode a place name, then get current weather at its coordinates.

        The returned weather is labeled with the geocoded name and country.
        """
        match = await self.resolve_city(city_name)
        weather = await self.get_current_weather(match.lat, match.lon)
        return weather.model_copy(update={"location": match.label}), match

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_status(self) -> CacheStatus:
        return self.cache.status()
