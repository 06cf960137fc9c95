"""OpenWeatherMap and geocoding HTTP client.

Raw passthrough: responses are returned as decoded JSON without any
transformation. No retries are performed; a single failed call surfaces
immediately as `UpstreamError`.
"""

from typing import Any, Optional

import httpx
import structlog

from src.config import Settings, get_settings
from src.models.weather import GeocodeResult, WeatherView
from src.services.errors import ConfigurationError, UpstreamError

logger = structlog.get_logger(__name__)


class WeatherClient:
    """Async client for the weather and geocoding providers."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.weather_api_timeout)
            )
        return self._client

    async def close(self):
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def require_api_key(self) -> str:
        """Return the configured API key.

        Raises:
            ConfigurationError: If no key is configured
        """
        if not self.settings.openweathermap_api_key:
            logger.error("weather_api_key_missing")
            raise ConfigurationError("OpenWeatherMap API key is not configured")
        return self.settings.openweathermap_api_key

    def _view_url(self, view: WeatherView) -> str:
        if view is WeatherView.CURRENT:
            return f"{self.settings.weather_api_base_url}/weather"
        if view is WeatherView.FORECAST:
            return f"{self.settings.weather_api_base_url}/forecast"
        return f"{self.settings.onecall_api_base_url}/onecall"

    async def _get_json(self, url: str, params: dict[str, Any]) -> Any:
        """Issue a single GET and decode the JSON body.

        Raises:
            UpstreamError: On non-2xx status, transport failure or invalid JSON
        """
        client = await self._get_client()

        try:
            response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            logger.error(
                "weather_api_request_failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamError(None, str(e) or type(e).__name__) from e

        if response.status_code < 200 or response.status_code >= 300:
            reason = response.reason_phrase or "error"
            logger.warning(
                "weather_api_error_status",
                url=url,
                status_code=response.status_code,
                reason=reason,
            )
            raise UpstreamError(response.status_code, reason)

        try:
            return response.json()
        except ValueError as e:
            logger.error("weather_api_invalid_json", url=url, error=str(e))
            raise UpstreamError(response.status_code, "invalid JSON body") from e

    async def fetch_view(self, view: WeatherView, lat: float, lon: float) -> dict:
        """Fetch the raw provider payload for a view at given coordinates.

        Args:
            view: Payload shape to request
            lat: Latitude
            lon: Longitude

        Returns:
            Decoded provider JSON

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamError: If the provider call fails
        """
        params: dict[str, Any] = {
            "lat": lat,
            "lon": lon,
            "appid": self.require_api_key(),
            "units": self.settings.weather_units,
        }
        if view is WeatherView.ONECALL:
            params["exclude"] = "minutely"

        logger.debug("weather_api_request", view=view.value, lat=lat, lon=lon)
        return await self._get_json(self._view_url(view), params)

    async def geocode(self, name: str, limit: int = 1) -> list[GeocodeResult]:
        """Resolve a free-text place name to coordinates.

        Returns:
            Matches in provider order, empty if the name is unknown

        Raises:
            ConfigurationError: If no API key is configured
            UpstreamError: If the provider call fails or returns a non-list
        """
        params = {
            "q": name,
            "limit": limit,
            "appid": self.require_api_key(),
        }
        data = await self._get_json(f"{self.settings.geocoding_api_url}/direct", params)

        if not isinstance(data, list):
            raise UpstreamError(None, "unexpected geocoding response")

        results = []
        for item in data[:limit]:
            try:
                results.append(
                    GeocodeResult(
                        lat=item["lat"],
                        lon=item["lon"],
                        name=item["name"],
                        country=item.get("country", ""),
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("geocoding_result_skipped", error=str(e))

        logger.info("geocoding_complete", query=name, matches=len(results))
        return results
