"""Pytest configuration and fixtures."""

import copy
import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("OPENWEATHERMAP_API_KEY", "test-api-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from src.config import Settings
from src.models.weather import WeatherView
from src.services.weather_client import WeatherClient

# 2024-02-01T00:00:00Z, a Thursday
DAY_START = 1706745600


@pytest.fixture
def test_settings() -> Settings:
    """Settings with short orchestration delays for tests."""
    return Settings(
        openweathermap_api_key="test-api-key",
        weather_api_base_url="https://api.openweathermap.org/data/2.5",
        onecall_api_base_url="https://api.openweathermap.org/data/3.0",
        geocoding_api_url="https://api.openweathermap.org/geo/1.0",
        weather_api_timeout=5,
        weather_cache_ttl=600,
        geolocation_timeout_seconds=0.05,
        search_error_display_seconds=0.05,
    )


@pytest.fixture
def current_payload() -> dict:
    """Current weather (`/weather`) response."""
    return {
        "coord": {"lon": -71.06, "lat": 42.36},
        "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds", "icon": "03d"}],
        "main": {
            "temp": 22.5,
            "feels_like": 21.4,
            "temp_min": 20.0,
            "temp_max": 24.0,
            "pressure": 1015,
            "humidity": 65,
        },
        "visibility": 8000,
        "wind": {"speed": 10, "deg": 200},
        "clouds": {"all": 40},
        "dt": DAY_START + 54400,
        "sys": {"country": "US", "sunrise": DAY_START + 40000, "sunset": DAY_START + 78000},
        "timezone": 0,
        "id": 4930956,
        "name": "Boston",
        "cod": 200,
    }


@pytest.fixture
def forecast_payload() -> dict:
    """Forecast (`/forecast`) response with 40 three-hour slots."""
    return {
        "cod": "200",
        "cnt": 40,
        "list": [
            {
                "dt": DAY_START + i * 10800,
                "main": {"temp": 15 + i * 0.25, "humidity": 70},
                "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
                "wind": {"speed": 5},
                "pop": 0.35,
            }
            for i in range(40)
        ],
        "city": {
            "name": "Boston",
            "country": "US",
            "coord": {"lat": 42.36, "lon": -71.06},
            "timezone": 0,
        },
    }


@pytest.fixture
def onecall_payload() -> dict:
    """One-call (`/onecall`) response with 8 days and three alerts."""
    return {
        "lat": 42.36,
        "lon": -71.06,
        "timezone": "UTC",
        "timezone_offset": 0,
        "daily": [
            {
                "dt": DAY_START + i * 86400 + 43200,
                "temp": {"day": 20, "min": 11.6, "max": 24.5, "night": 12, "eve": 18, "morn": 13},
                "humidity": 60,
                "wind_speed": 4,
                "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
                "pop": 0.2,
                "uvi": 5.1,
            }
            for i in range(8)
        ],
        "alerts": [
            {
                "sender_name": "NWS Boston",
                "event": "Severe Thunderstorm Warning",
                "start": DAY_START + 54400,
                "end": DAY_START + 61600,
                "description": "Damaging winds possible.",
            },
            {
                "sender_name": "NWS Boston",
                "event": "Heavy Rain Advisory",
                "start": DAY_START,
                "end": DAY_START + 86400,
                "description": "Localized flooding.",
            },
            {
                "sender_name": "NWS Boston",
                "event": "Wind Advisory",
                "start": DAY_START,
                "end": DAY_START + 43200,
                "description": "Gusts to 50 mph.",
            },
        ],
    }


@pytest.fixture
def geocode_matches() -> list[dict]:
    """Geocoding (`/direct`) response for 'Paris'."""
    return [{"name": "Paris", "lat": 48.8566, "lon": 2.3522, "country": "FR", "state": "Ile-de-France"}]


@pytest.fixture
def mock_weather_client(test_settings, current_payload, forecast_payload, onecall_payload) -> AsyncMock:
    """Upstream client that serves the sample payloads per view."""
    payloads = {
        WeatherView.CURRENT: current_payload,
        WeatherView.FORECAST: forecast_payload,
        WeatherView.ONECALL: onecall_payload,
    }

    async def fetch_view(view, lat, lon):
        return copy.deepcopy(payloads[view])

    client = AsyncMock(spec=WeatherClient)
    client.settings = test_settings
    client.fetch_view.side_effect = fetch_view
    client.geocode.return_value = []
    return client


@pytest.fixture
async def async_client(test_settings, mock_weather_client) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client against the app with a mocked upstream client."""
    from src.main import app, init_app_state

    init_app_state(app, test_settings, client=mock_weather_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
