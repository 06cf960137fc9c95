"""Unit tests for the dashboard CLI."""

import json
import random
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from src.cli import dashboard
from src.models.weather import GeocodeResult
from src.services.cache_service import ResponseCache
from src.services.dashboard_service import DashboardSession
from src.services.errors import UpstreamError
from src.services.weather_service import WeatherService


@pytest.fixture
def built_session(mock_weather_client, test_settings):
    service = WeatherService(mock_weather_client, ResponseCache(), rng=random.Random(9))
    return DashboardSession(service, test_settings), mock_weather_client


def _invoke(built_session, args):
    runner = CliRunner()
    with patch("src.cli._build_session", return_value=built_session):
        return runner.invoke(dashboard, args)


class TestShowCommand:
    def test_table_output(self, built_session):
        result = _invoke(built_session, ["show", "--lat", "42.36", "--lon", "-71.06"])

        assert result.exit_code == 0, result.output
        assert "Boston, US (Current Location)" in result.output
        assert "23°C" in result.output
        assert "Alerts: 1 severe, 2 moderate, 0 minor" in result.output
        assert "[severe] Severe Thunderstorm Warning (storm)" in result.output

    def test_fahrenheit(self, built_session):
        result = _invoke(
            built_session,
            ["show", "--lat", "42.36", "--lon", "-71.06", "--units", "fahrenheit"],
        )

        assert result.exit_code == 0, result.output
        assert "73°F" in result.output

    def test_json_output(self, built_session):
        result = _invoke(
            built_session,
            ["show", "--lat", "42.36", "--lon", "-71.06", "--format", "json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["location"]["city"] == "Current Location"
        assert len(data["hourly"]) == 24
        assert len(data["daily"]) == 7

    def test_no_coordinates_uses_default_city(self, built_session):
        result = _invoke(built_session, ["show", "--format", "json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["location"]["city"] == "San Francisco, CA"

    def test_closes_client(self, built_session):
        _, client = built_session
        _invoke(built_session, ["show"])
        client.close.assert_awaited_once()


class TestSearchCommand:
    def test_search_success(self, built_session):
        _, client = built_session
        client.geocode.return_value = [
            GeocodeResult(lat=48.8566, lon=2.3522, name="Paris", country="FR")
        ]

        result = _invoke(built_session, ["search", "Paris"])

        assert result.exit_code == 0, result.output
        assert "Paris, FR (Paris, FR)" in result.output

    def test_search_not_found(self, built_session):
        result = _invoke(built_session, ["search", "Atlantis"])

        assert result.exit_code == 1
        assert 'City "Atlantis" not found' in result.output

    def test_search_upstream_failure(self, built_session):
        _, client = built_session
        client.geocode.side_effect = UpstreamError(503, "Service Unavailable")

        result = _invoke(built_session, ["search", "Paris"])

        assert result.exit_code == 1
        assert "Service Unavailable" in result.output
