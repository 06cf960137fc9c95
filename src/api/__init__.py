"""API package exports."""

from src.api.middleware import CorrelationIdMiddleware
from src.api.routes import router
from src.api.weather_proxy import router as weather_proxy_router

__all__ = ["router", "weather_proxy_router", "CorrelationIdMiddleware"]
