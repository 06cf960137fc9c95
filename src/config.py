"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenWeatherMap Configuration
    openweathermap_api_key: str = ""  # Required for upstream calls
    weather_api_base_url: str = "https://api.openweathermap.org/data/2.5"
    onecall_api_base_url: str = "https://api.openweathermap.org/data/3.0"
    geocoding_api_url: str = "https://api.openweathermap.org/geo/1.0"
    weather_units: str = "metric"
    weather_api_timeout: int = 5  # 5 second timeout per request

    # Cache
    weather_cache_ttl: int = 600  # 10 minutes

    # Default location when device coordinates are unavailable
    default_lat: float = 37.7749
    default_lon: float = -122.4194
    default_city: str = "San Francisco, CA"

    # Query orchestration
    geolocation_timeout_seconds: float = 10.0
    search_error_display_seconds: float = 3.0

    # Logging
    log_level: str = "INFO"

    # HTTP
    cors_origins: str = "*"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
