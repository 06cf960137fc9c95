"""Error taxonomy for the weather data layer."""

from typing import Optional


class WeatherServiceError(Exception):
    """Base class for weather data failures."""


class UpstreamError(WeatherServiceError):
    """Raised on a non-2xx provider response or a network failure.

    Attributes:
        status_code: HTTP status from the provider, None for transport failures
        reason: Status reason or transport error text
    """

    def __init__(self, status_code: Optional[int], reason: str):
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            super().__init__(f"Upstream request failed: {reason}")
        else:
            super().__init__(f"Upstream request failed: HTTP {status_code} {reason}")


class NotFoundError(WeatherServiceError):
    """Raised when geocoding returns no match for a place name."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f'City "{query}" not found')


class ConfigurationError(WeatherServiceError):
    """Raised when the provider API key is missing."""


class GeolocationError(WeatherServiceError):
    """Raised when device location is denied or unavailable."""


class NormalizationError(WeatherServiceError):
    """Raised when a provider payload lacks fields a view model needs."""
