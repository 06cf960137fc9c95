"""Click CLI for viewing the dashboard from a terminal."""

from __future__ import annotations

import asyncio
import json
import sys

import click
from dotenv import load_dotenv

from src.config import get_settings
from src.models.weather import DashboardSnapshot
from src.services.cache_service import ResponseCache
from src.services.dashboard_service import CoordinateLocator, DashboardSession
from src.services.errors import WeatherServiceError
from src.services.logging_service import configure_logging
from src.services.normalization import active_alerts, celsius_to_fahrenheit, summarize_alerts
from src.services.weather_client import WeatherClient
from src.services.weather_service import WeatherService


def _build_session() -> tuple[DashboardSession, WeatherClient]:
    settings = get_settings()
    client = WeatherClient(settings)
    service = WeatherService(client, ResponseCache(ttl_seconds=settings.weather_cache_ttl))
    return DashboardSession(service, settings), client


@click.group()
@click.option("--log-level", default="WARNING", help="Logging level.")
def dashboard(log_level: str) -> None:
    """Weather dashboard: current conditions, forecasts and alerts."""
    load_dotenv()
    # Logs go to stderr so `--format json` output stays parseable
    configure_logging(log_level, stream=sys.stderr)


_format_option = click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format.",
)
_units_option = click.option(
    "--units",
    default="celsius",
    type=click.Choice(["celsius", "fahrenheit"]),
    help="Temperature display unit.",
)


@dashboard.command()
@click.option("--lat", type=float, default=None, help="Device latitude.")
@click.option("--lon", type=float, default=None, help="Device longitude.")
@_units_option
@_format_option
def show(lat: float | None, lon: float | None, units: str, output_format: str) -> None:
    """Show the dashboard for given coordinates, else the default city."""

    async def _run() -> DashboardSnapshot | None:
        session, client = _build_session()
        try:
            return await session.locate_then_fetch(CoordinateLocator(lat, lon))
        finally:
            await client.close()

    snapshot = asyncio.run(_run())
    _print_snapshot(snapshot, units, output_format)


@dashboard.command()
@click.argument("city")
@_units_option
@_format_option
def search(city: str, units: str, output_format: str) -> None:
    """Show the dashboard for a city by name."""

    async def _run() -> DashboardSnapshot | None:
        session, client = _build_session()
        try:
            return await session.search(city)
        finally:
            await client.close()

    try:
        snapshot = asyncio.run(_run())
    except WeatherServiceError as e:
        click.echo(f"Failed to get weather for {city}: {e}", err=True)
        sys.exit(1)
    _print_snapshot(snapshot, units, output_format)


def _temp(value: int, units: str) -> str:
    if units == "fahrenheit":
        return f"{celsius_to_fahrenheit(value)}°F"
    return f"{value}°C"


def _print_snapshot(snapshot: DashboardSnapshot | None, units: str, output_format: str) -> None:
    if snapshot is None:
        click.echo("No dashboard data available.")
        return

    if output_format == "json":
        click.echo(json.dumps(snapshot.model_dump(mode="json"), indent=2))
        return

    current = snapshot.current
    click.echo()
    click.echo(f"{current.location} ({snapshot.location.city})")
    click.echo("=" * 60)
    click.echo(f"  {_temp(current.temperature, units)}  {current.condition}")
    click.echo(f"  Feels like {_temp(current.feels_like, units)}")
    click.echo(
        f"  Humidity {current.humidity}%  Wind {current.wind_speed} km/h  "
        f"Visibility {current.visibility:g} km  Pressure {current.pressure} hPa"
    )
    click.echo()

    click.echo("Hourly")
    for entry in snapshot.hourly[:12]:
        click.echo(
            f"  {entry.time:<5} {_temp(entry.temperature, units):<7} "
            f"{entry.precipitation:>3}%  {entry.condition}"
        )
    click.echo()

    click.echo("Daily")
    for entry in snapshot.daily:
        click.echo(
            f"  {entry.day:<6} {_temp(entry.high_temp, units):>6} / "
            f"{_temp(entry.low_temp, units):<6} {entry.precipitation:>3}%  {entry.condition}"
        )
    click.echo()

    summary = summarize_alerts(snapshot.alerts)
    if summary.total == 0:
        click.echo("No active alerts.")
        return
    click.echo(
        f"Alerts: {summary.severe} severe, {summary.moderate} moderate, {summary.minor} minor"
    )
    for alert in active_alerts(snapshot.alerts):
        click.echo(f"  [{alert.type.value}] {alert.title} ({alert.category.value})")


if __name__ == "__main__":
    dashboard()
