"""Weather view models served to the dashboard."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WeatherView(str, Enum):
    """Provider payload shape selected by the proxy `type` parameter."""

    CURRENT = "current"
    FORECAST = "forecast"
    ONECALL = "onecall"


class AlertSeverity(str, Enum):
    """Derived alert tier."""

    SEVERE = "severe"
    MODERATE = "moderate"
    MINOR = "minor"


class AlertCategory(str, Enum):
    """Derived alert category."""

    STORM = "storm"
    RAIN = "rain"
    WIND = "wind"
    SNOW = "snow"
    TEMPERATURE = "temperature"
    OTHER = "other"


class Coordinates(BaseModel):
    """Geographic coordinates."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class CurrentWeather(BaseModel):
    """Current conditions for a location."""

    model_config = ConfigDict(frozen=True)

    location: str = Field(..., description="Location label, e.g. 'Boston, US'")
    temperature: int = Field(..., description="Temperature in Celsius")
    condition: str = Field(..., description="Condition text from provider")
    humidity: int = Field(..., ge=0, le=100, description="Humidity percentage")
    wind_speed: int = Field(..., ge=0, description="Wind speed in km/h")
    visibility: float = Field(..., ge=0, description="Visibility in km")
    feels_like: int = Field(..., description="Feels like temperature in Celsius")
    icon: str = Field(..., description="Weather icon code from provider")
    pressure: int = Field(..., description="Pressure in hPa")
    uv_index: Optional[float] = Field(None, description="UV index if known")
    coordinates: Coordinates


class HourlyForecastEntry(BaseModel):
    """One hourly forecast slot."""

    model_config = ConfigDict(frozen=True)

    time: str = Field(..., description="24-hour hour label, e.g. '14'")
    temperature: int
    condition: str
    humidity: int = Field(..., ge=0, le=100)
    precipitation: int = Field(
        ..., ge=0, le=100, description="Precipitation probability percentage"
    )
    wind_speed: int = Field(..., ge=0, description="Wind speed in km/h")
    icon: str


class DailyForecastEntry(BaseModel):
    """One daily forecast row."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="ISO date")
    day: str = Field(..., description="'Today' or abbreviated weekday")
    high_temp: int
    low_temp: int
    condition: str
    precipitation: int = Field(..., ge=0, le=100)
    humidity: int = Field(..., ge=0, le=100)
    wind_speed: int = Field(..., ge=0)
    icon: str
    uv_index: Optional[float] = None


class WeatherAlert(BaseModel):
    """Alert with derived tier and category."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: AlertSeverity
    category: AlertCategory
    title: str
    description: str
    location: str
    severity: int = Field(..., ge=1, le=10)
    start_time: str
    end_time: str
    is_active: bool = True


class AlertSummary(BaseModel):
    """Active alert counts per tier."""

    total: int = 0
    severe: int = 0
    moderate: int = 0
    minor: int = 0


class GeocodeResult(BaseModel):
    """Single geocoding match."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    name: str
    country: str = ""

    @property
    def label(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name


class DashboardLocation(BaseModel):
    """Location the dashboard is showing."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float
    city: str


class DashboardSnapshot(BaseModel):
    """All four view models for one location, replaced wholesale on refresh."""

    model_config = ConfigDict(frozen=True)

    location: DashboardLocation
    current: CurrentWeather
    hourly: list[HourlyForecastEntry] = Field(default_factory=list, max_length=24)
    daily: list[DailyForecastEntry] = Field(default_factory=list, max_length=7)
    alerts: list[WeatherAlert] = Field(default_factory=list)


class DashboardState(BaseModel):
    """Dashboard state exposed to the presentation layer."""

    snapshot: Optional[DashboardSnapshot] = None
    search_error: Optional[str] = None
    loading: bool = False


class CacheStatus(BaseModel):
    """Cache size report."""

    entries: int = Field(..., ge=0)
    size_bytes: int = Field(..., ge=0)
