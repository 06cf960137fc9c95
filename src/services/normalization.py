"""Pure transforms from raw OpenWeatherMap payloads to view models.

Payload shapes:
- current: `/weather` response (`main`, `weather[0]`, `wind`, `sys`, `coord`)
- forecast: `/forecast` response (`list` of 3-hour slots, `city.timezone`)
- onecall: `/onecall` response (`daily`, optional `alerts`, `timezone_offset`)

Each function raises `NormalizationError` when a payload is missing fields
it needs; the fetch boundary turns that into fallback data.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from src.models.weather import (
    AlertCategory,
    AlertSeverity,
    AlertSummary,
    Coordinates,
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    WeatherAlert,
)
from src.services.errors import NormalizationError

MAX_HOURLY_ENTRIES = 24
MAX_DAILY_ENTRIES = 7
ALERT_LOCATION_LABEL = "Current Area"

# Ordered (keywords, result) rules; the first rule whose keyword occurs in the
# lowercased event text wins.
SEVERITY_RULES: list[tuple[tuple[str, ...], AlertSeverity]] = [
    (("severe", "extreme", "warning"), AlertSeverity.SEVERE),
    (("watch", "advisory"), AlertSeverity.MODERATE),
]
DEFAULT_SEVERITY = AlertSeverity.MINOR

SEVERITY_SCORES = {
    AlertSeverity.SEVERE: 8,
    AlertSeverity.MODERATE: 6,
    AlertSeverity.MINOR: 3,
}

CATEGORY_RULES: list[tuple[tuple[str, ...], AlertCategory]] = [
    (("storm", "thunder"), AlertCategory.STORM),
    (("rain", "flood"), AlertCategory.RAIN),
    (("wind",), AlertCategory.WIND),
    (("snow", "winter"), AlertCategory.SNOW),
    (("temperature", "heat", "cold"), AlertCategory.TEMPERATURE),
]
DEFAULT_CATEGORY = AlertCategory.OTHER


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def mps_to_kmh(mps: float) -> int:
    """Convert meters/second to rounded kilometers/hour."""
    return round_half_up(mps * 3.6)


def meters_to_km(meters: float) -> float:
    """Convert meters to kilometers."""
    return meters / 1000


def celsius_to_fahrenheit(celsius: float) -> int:
    """Convert Celsius to rounded Fahrenheit for the °F display unit."""
    return round_half_up(celsius * 9 / 5 + 32)


def _local_datetime(unix_seconds: int, offset_seconds: Optional[int]) -> datetime:
    tz = timezone(timedelta(seconds=offset_seconds or 0))
    return datetime.fromtimestamp(unix_seconds, tz=tz)


def _to_iso(unix_seconds: int) -> str:
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).isoformat()


def _first_match(text: str, rules: Iterable[tuple[tuple[str, ...], Any]], default: Any) -> Any:
    lowered = text.lower()
    for keywords, result in rules:
        if any(keyword in lowered for keyword in keywords):
            return result
    return default


def classify_severity(event: str) -> AlertSeverity:
    """Derive the alert tier from its event text."""
    return _first_match(event, SEVERITY_RULES, DEFAULT_SEVERITY)


def classify_category(event: str) -> AlertCategory:
    """Derive the alert category from its event text."""
    return _first_match(event, CATEGORY_RULES, DEFAULT_CATEGORY)


def normalize_current(data: dict) -> CurrentWeather:
    """Map a current-weather payload to `CurrentWeather`."""
    try:
        main = data["main"]
        weather = data["weather"][0]
        return CurrentWeather(
            location=f"{data['name']}, {data['sys']['country']}",
            temperature=round_half_up(main["temp"]),
            condition=weather["description"],
            humidity=main["humidity"],
            wind_speed=mps_to_kmh(data["wind"]["speed"]),
            visibility=meters_to_km(data.get("visibility", 10000)),
            feels_like=round_half_up(main["feels_like"]),
            icon=weather["icon"],
            pressure=main["pressure"],
            uv_index=data.get("uvi"),
            coordinates=Coordinates(lat=data["coord"]["lat"], lon=data["coord"]["lon"]),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise NormalizationError(f"Invalid current weather payload: {e!r}") from e


def normalize_hourly(data: dict) -> list[HourlyForecastEntry]:
    """Map a forecast payload to at most 24 hourly entries."""
    try:
        offset = (data.get("city") or {}).get("timezone")
        entries = []
        for item in data["list"][:MAX_HOURLY_ENTRIES]:
            weather = item["weather"][0]
            entries.append(
                HourlyForecastEntry(
                    time=_local_datetime(item["dt"], offset).strftime("%H"),
                    temperature=round_half_up(item["main"]["temp"]),
                    condition=weather["description"],
                    humidity=item["main"]["humidity"],
                    precipitation=round_half_up(item.get("pop", 0) * 100),
                    wind_speed=mps_to_kmh(item["wind"]["speed"]),
                    icon=weather["icon"],
                )
            )
        return entries
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise NormalizationError(f"Invalid forecast payload: {e!r}") from e


def normalize_daily(data: dict) -> list[DailyForecastEntry]:
    """Map a one-call payload to at most 7 daily entries, the first labeled Today."""
    try:
        offset = data.get("timezone_offset")
        entries = []
        for index, item in enumerate(data["daily"][:MAX_DAILY_ENTRIES]):
            weather = item["weather"][0]
            day = _local_datetime(item["dt"], offset)
            entries.append(
                DailyForecastEntry(
                    date=day.date().isoformat(),
                    day="Today" if index == 0 else day.strftime("%a"),
                    high_temp=round_half_up(item["temp"]["max"]),
                    low_temp=round_half_up(item["temp"]["min"]),
                    condition=weather["description"],
                    precipitation=round_half_up(item.get("pop", 0) * 100),
                    humidity=item["humidity"],
                    wind_speed=mps_to_kmh(item["wind_speed"]),
                    icon=weather["icon"],
                    uv_index=item.get("uvi"),
                )
            )
        return entries
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise NormalizationError(f"Invalid one-call payload: {e!r}") from e


def normalize_alerts(data: dict) -> list[WeatherAlert]:
    """Map one-call alerts to `WeatherAlert`s; no `alerts` key means none."""
    try:
        alerts = []
        for index, item in enumerate(data.get("alerts") or []):
            event = item["event"]
            tier = classify_severity(event)
            alerts.append(
                WeatherAlert(
                    id=f"alert-{index}",
                    type=tier,
                    category=classify_category(event),
                    title=event,
                    description=item.get("description", ""),
                    location=ALERT_LOCATION_LABEL,
                    severity=SEVERITY_SCORES[tier],
                    start_time=_to_iso(item["start"]),
                    end_time=_to_iso(item["end"]),
                    is_active=True,
                )
            )
        return alerts
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise NormalizationError(f"Invalid alerts payload: {e!r}") from e


def active_alerts(alerts: Iterable[WeatherAlert]) -> list[WeatherAlert]:
    """Active alerts, most severe first."""
    return sorted(
        (alert for alert in alerts if alert.is_active),
        key=lambda alert: alert.severity,
        reverse=True,
    )


def summarize_alerts(alerts: Iterable[WeatherAlert]) -> AlertSummary:
    """Count active alerts per tier."""
    summary = {tier: 0 for tier in AlertSeverity}
    active = active_alerts(alerts)
    for alert in active:
        summary[alert.type] += 1
    return AlertSummary(
        total=len(active),
        severe=summary[AlertSeverity.SEVERE],
        moderate=summary[AlertSeverity.MODERATE],
        minor=summary[AlertSeverity.MINOR],
    )
