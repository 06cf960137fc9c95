"""Placeholder view models used when an upstream fetch fails.

Inputs are literals and a random source only, so nothing here can fail.
Forecast placeholders are random within realistic bounds and exist to keep
the dashboard populated during an outage.
"""

import random
from datetime import date, timedelta
from typing import Optional

from src.models.weather import (
    Coordinates,
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    WeatherAlert,
)

FALLBACK_CONDITIONS = ("Clear", "Clouds", "Rain")
FALLBACK_ICON = "01d"


def fallback_current(lat: float, lon: float) -> CurrentWeather:
    """Fixed placeholder current conditions at the requested coordinates."""
    return CurrentWeather(
        location="Unknown Location",
        temperature=20,
        condition="Unknown",
        humidity=50,
        wind_speed=10,
        visibility=10,
        feels_like=20,
        icon=FALLBACK_ICON,
        pressure=1013,
        coordinates=Coordinates(lat=lat, lon=lon),
    )


def fallback_hourly(rng: Optional[random.Random] = None) -> list[HourlyForecastEntry]:
    """24 random hourly slots labeled 'Now', '1:00', '2:00', ..."""
    rng = rng or random
    return [
        HourlyForecastEntry(
            time="Now" if i == 0 else f"{i}:00",
            temperature=rng.randrange(18, 30),
            condition=rng.choice(FALLBACK_CONDITIONS),
            humidity=rng.randrange(40, 80),
            precipitation=rng.randrange(0, 100),
            wind_speed=rng.randrange(5, 25),
            icon=FALLBACK_ICON,
        )
        for i in range(24)
    ]


def fallback_daily(
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> list[DailyForecastEntry]:
    """7 random daily rows starting today."""
    rng = rng or random
    today = today or date.today()
    entries = []
    for i in range(7):
        day = today + timedelta(days=i)
        entries.append(
            DailyForecastEntry(
                date=day.isoformat(),
                day="Today" if i == 0 else day.strftime("%a"),
                high_temp=rng.randrange(22, 30),
                low_temp=rng.randrange(12, 20),
                condition=rng.choice(FALLBACK_CONDITIONS),
                precipitation=rng.randrange(0, 100),
                humidity=rng.randrange(50, 80),
                wind_speed=rng.randrange(5, 20),
                icon=FALLBACK_ICON,
            )
        )
    return entries


def fallback_alerts() -> list[WeatherAlert]:
    return []
