"""Unit tests for the upstream weather client."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.models.weather import GeocodeResult, WeatherView
from src.services.errors import ConfigurationError, UpstreamError
from src.services.weather_client import WeatherClient


def _response(status_code=200, json_data=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason_phrase = reason
    response.json.return_value = json_data
    return response


@pytest.fixture
def mock_http():
    client = AsyncMock()
    client.is_closed = False
    return client


@pytest.fixture
def weather_client(test_settings, mock_http):
    client = WeatherClient(test_settings)
    client._client = mock_http
    return client


class TestFetchView:
    """Tests for WeatherClient.fetch_view."""

    @pytest.mark.asyncio
    async def test_current_returns_raw_payload(self, weather_client, mock_http, current_payload):
        mock_http.get.return_value = _response(json_data=current_payload)

        data = await weather_client.fetch_view(WeatherView.CURRENT, 42.36, -71.06)

        assert data == current_payload
        url = mock_http.get.call_args.args[0]
        params = mock_http.get.call_args.kwargs["params"]
        assert url == "https://api.openweathermap.org/data/2.5/weather"
        assert params == {
            "lat": 42.36,
            "lon": -71.06,
            "appid": "test-api-key",
            "units": "metric",
        }

    @pytest.mark.asyncio
    async def test_forecast_url(self, weather_client, mock_http):
        mock_http.get.return_value = _response(json_data={"list": []})

        await weather_client.fetch_view(WeatherView.FORECAST, 1.0, 2.0)

        assert mock_http.get.call_args.args[0].endswith("/data/2.5/forecast")

    @pytest.mark.asyncio
    async def test_onecall_excludes_minutely(self, weather_client, mock_http):
        mock_http.get.return_value = _response(json_data={"daily": []})

        await weather_client.fetch_view(WeatherView.ONECALL, 1.0, 2.0)

        assert mock_http.get.call_args.args[0] == "https://api.openweathermap.org/data/3.0/onecall"
        assert mock_http.get.call_args.kwargs["params"]["exclude"] == "minutely"

    @pytest.mark.asyncio
    async def test_error_status_raises_without_retry(self, weather_client, mock_http):
        mock_http.get.return_value = _response(status_code=503, reason="Service Unavailable")

        with pytest.raises(UpstreamError) as exc_info:
            await weather_client.fetch_view(WeatherView.CURRENT, 1.0, 2.0)

        assert exc_info.value.status_code == 503
        assert exc_info.value.reason == "Service Unavailable"
        assert mock_http.get.call_count == 1

    @pytest.mark.asyncio
    async def test_network_error_raises_upstream_error(self, weather_client, mock_http):
        mock_http.get.side_effect = httpx.ConnectError("Connection refused")

        with pytest.raises(UpstreamError) as exc_info:
            await weather_client.fetch_view(WeatherView.CURRENT, 1.0, 2.0)

        assert exc_info.value.status_code is None
        assert "Connection refused" in exc_info.value.reason
        assert mock_http.get.call_count == 1

    @pytest.mark.asyncio
    async def test_timeout_not_retried(self, weather_client, mock_http):
        mock_http.get.side_effect = httpx.TimeoutException("Timeout")

        with pytest.raises(UpstreamError):
            await weather_client.fetch_view(WeatherView.CURRENT, 1.0, 2.0)

        assert mock_http.get.call_count == 1

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, weather_client, mock_http):
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_http.get.return_value = response

        with pytest.raises(UpstreamError):
            await weather_client.fetch_view(WeatherView.CURRENT, 1.0, 2.0)

    @pytest.mark.asyncio
    async def test_missing_api_key(self, test_settings, mock_http):
        settings = test_settings.model_copy(update={"openweathermap_api_key": ""})
        client = WeatherClient(settings)
        client._client = mock_http

        with pytest.raises(ConfigurationError):
            await client.fetch_view(WeatherView.CURRENT, 1.0, 2.0)

        mock_http.get.assert_not_called()


class TestGeocode:
    """Tests for WeatherClient.geocode."""

    @pytest.mark.asyncio
    async def test_geocode_match(self, weather_client, mock_http, geocode_matches):
        mock_http.get.return_value = _response(json_data=geocode_matches)

        results = await weather_client.geocode("Paris")

        assert results == [GeocodeResult(lat=48.8566, lon=2.3522, name="Paris", country="FR")]
        assert results[0].label == "Paris, FR"
        url = mock_http.get.call_args.args[0]
        params = mock_http.get.call_args.kwargs["params"]
        assert url == "https://api.openweathermap.org/geo/1.0/direct"
        assert params["q"] == "Paris"
        assert params["limit"] == 1

    @pytest.mark.asyncio
    async def test_geocode_no_match(self, weather_client, mock_http):
        mock_http.get.return_value = _response(json_data=[])

        assert await weather_client.geocode("Atlantis") == []

    @pytest.mark.asyncio
    async def test_geocode_error_status(self, weather_client, mock_http):
        mock_http.get.return_value = _response(status_code=401, reason="Unauthorized")

        with pytest.raises(UpstreamError) as exc_info:
            await weather_client.geocode("Paris")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_geocode_unexpected_shape(self, weather_client, mock_http):
        mock_http.get.return_value = _response(json_data={"cod": 400})

        with pytest.raises(UpstreamError):
            await weather_client.geocode("Paris")


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_close(self, weather_client, mock_http):
        await weather_client.close()

        mock_http.aclose.assert_awaited_once()
        assert weather_client._client is None

    @pytest.mark.asyncio
    async def test_get_client_creates_async_client(self, test_settings):
        client = WeatherClient(test_settings)
        http = await client._get_client()
        try:
            assert isinstance(http, httpx.AsyncClient)
            assert await client._get_client() is http
        finally:
            await client.close()
