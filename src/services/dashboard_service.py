"""Dashboard query orchestration: locate-then-fetch and search-by-name.

Both entry points fetch the four view models concurrently. Each fetch
resolves through its own cache/fallback path, so the joint wait cannot fail.
Every request takes a generation number when it is issued; a request that
finishes after a newer one was issued is discarded instead of overwriting
fresher data or showing a stale search error.
"""

import asyncio
from typing import Optional, Protocol

import structlog

from src.config import Settings, get_settings
from src.models.weather import (
    Coordinates,
    DashboardLocation,
    DashboardSnapshot,
    DashboardState,
)
from src.services.errors import GeolocationError, WeatherServiceError
from src.services.weather_service import WeatherService

logger = structlog.get_logger(__name__)

CURRENT_LOCATION_LABEL = "Current Location"


class DeviceLocator(Protocol):
    """Single-shot source of device coordinates."""

    async def locate(self) -> Coordinates:
        """Return device coordinates or raise GeolocationError."""
        ...


class CoordinateLocator:
    """Locator for coordinates reported by the browser, if any."""

    def __init__(self, lat: Optional[float] = None, lon: Optional[float] = None):
        self.lat = lat
        self.lon = lon

    async def locate(self) -> Coordinates:
        if self.lat is None or self.lon is None:
            raise GeolocationError("Geolocation is not available")
        try:
            return Coordinates(lat=self.lat, lon=self.lon)
        except ValueError as e:
            raise GeolocationError(f"Invalid device coordinates: {e}") from e


class DashboardSession:
    """Holds the displayed snapshot and drives refreshes."""

    def __init__(self, service: WeatherService, settings: Optional[Settings] = None):
        self.service = service
        self.settings = settings or get_settings()
        self.snapshot: Optional[DashboardSnapshot] = None
        self.search_error: Optional[str] = None
        self._generation = 0
        self._in_flight = 0
        self._error_handle: Optional[asyncio.TimerHandle] = None

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def default_location(self) -> DashboardLocation:
        return DashboardLocation(
            lat=self.settings.default_lat,
            lon=self.settings.default_lon,
            city=self.settings.default_city,
        )

    def state(self) -> DashboardState:
        return DashboardState(
            snapshot=self.snapshot,
            search_error=self.search_error,
            loading=self.loading,
        )

    async def _fetch_snapshot(
        self, location: DashboardLocation, current_label: Optional[str] = None
    ) -> DashboardSnapshot:
        lat, lon = location.lat, location.lon
        current, hourly, daily, alerts = await asyncio.gather(
            self.service.get_current_weather(lat, lon),
            self.service.get_hourly_forecast(lat, lon),
            self.service.get_daily_forecast(lat, lon),
            self.service.get_weather_alerts(lat, lon),
        )
        if current_label:
            current = current.model_copy(update={"location": current_label})
        return DashboardSnapshot(
            location=location,
            current=current,
            hourly=hourly,
            daily=daily,
            alerts=alerts,
        )

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def load(
        self,
        location: DashboardLocation,
        current_label: Optional[str] = None,
        generation: Optional[int] = None,
    ) -> Optional[DashboardSnapshot]:
        """Fetch all four view models for a location and display them.

        Args:
            location: Location to show
            current_label: Replaces the provider's location label if given
            generation: Generation taken when the request was issued; a new
                one is taken if omitted

        Returns:
            The displayed snapshot, or None if a newer request superseded this one
        """
        if generation is None:
            generation = self._next_generation()
        self._in_flight += 1
        try:
            snapshot = await self._fetch_snapshot(location, current_label)
        finally:
            self._in_flight -= 1

        if self._is_stale(generation):
            logger.info(
                "dashboard_stale_result_discarded",
                generation=generation,
                latest_generation=self._generation,
                city=location.city,
            )
            return None

        self.snapshot = snapshot
        logger.info(
            "dashboard_loaded",
            city=location.city,
            lat=location.lat,
            lon=location.lon,
            hourly=len(snapshot.hourly),
            daily=len(snapshot.daily),
            alerts=len(snapshot.alerts),
        )
        return snapshot

    async def locate_then_fetch(
        self, locator: Optional[DeviceLocator] = None
    ) -> Optional[DashboardSnapshot]:
        """Load the dashboard for the device location, else the default location."""
        generation = self._next_generation()
        location = self.default_location
        if locator is not None:
            try:
                coords = await asyncio.wait_for(
                    locator.locate(), timeout=self.settings.geolocation_timeout_seconds
                )
                location = DashboardLocation(
                    lat=coords.lat, lon=coords.lon, city=CURRENT_LOCATION_LABEL
                )
            except (GeolocationError, asyncio.TimeoutError) as e:
                logger.info(
                    "geolocation_unavailable",
                    error=str(e),
                    error_type=type(e).__name__,
                    fallback_city=location.city,
                )
        return await self.load(location, generation=generation)

    async def search(self, query: str) -> Optional[DashboardSnapshot]:
        """Replace the displayed location with a geocoded place name.

        Blank queries are ignored. On failure a transient `search_error` is
        set, the displayed snapshot is left unchanged and the error is
        re-raised. A search superseded by a newer request while geocoding
        returns None and never sets `search_error`.

        Raises:
            NotFoundError: If the name has no geocoding match
            UpstreamError: If the geocoding call fails
            ConfigurationError: If no API key is configured
        """
        query = query.strip()
        if not query:
            return self.snapshot

        generation = self._next_generation()
        self._clear_search_error()
        self._in_flight += 1
        try:
            match = await self.service.resolve_city(query)
        except WeatherServiceError as e:
            logger.warning(
                "dashboard_search_failed",
                query=query,
                error=str(e),
                error_type=type(e).__name__,
            )
            if not self._is_stale(generation):
                self._show_search_error(f"Failed to get weather for {query}: {e}")
            raise
        finally:
            self._in_flight -= 1

        if self._is_stale(generation):
            logger.info(
                "dashboard_stale_result_discarded",
                generation=generation,
                latest_generation=self._generation,
                query=query,
            )
            return None

        location = DashboardLocation(lat=match.lat, lon=match.lon, city=match.label)
        return await self.load(location, current_label=match.label, generation=generation)

    def _show_search_error(self, message: str) -> None:
        """Set the search error and schedule it to clear itself."""
        if self._error_handle is not None:
            self._error_handle.cancel()
        self.search_error = message
        loop = asyncio.get_running_loop()
        self._error_handle = loop.call_later(
            self.settings.search_error_display_seconds, self._clear_search_error
        )

    def _clear_search_error(self) -> None:
        if self._error_handle is not None:
            self._error_handle.cancel()
            self._error_handle = None
        self.search_error = None
