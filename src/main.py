"""FastAPI application initialization."""

from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.middleware import CorrelationIdMiddleware
from src.api.routes import router
from src.api.weather_proxy import router as weather_proxy_router
from src.config import Settings, get_settings
from src.services.cache_service import ResponseCache
from src.services.dashboard_service import DashboardSession
from src.services.logging_service import configure_logging, get_logger
from src.services.weather_client import WeatherClient
from src.services.weather_service import WeatherService


def init_app_state(
    app: FastAPI,
    settings: Optional[Settings] = None,
    client: Optional[WeatherClient] = None,
) -> None:
    """Build the shared client, cache, service and session once per app."""
    settings = settings or get_settings()
    client = client or WeatherClient(settings)
    cache = ResponseCache(ttl_seconds=settings.weather_cache_ttl)
    service = WeatherService(client, cache)

    app.state.weather_client = client
    app.state.weather_service = service
    app.state.dashboard_session = DashboardSession(service, settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    init_app_state(app, settings)

    if not settings.openweathermap_api_key:
        logger.warning(
            "weather_api_key_missing",
            note="Continuing without API key - dashboard will serve fallback data",
        )

    logger.info(
        "application_started",
        log_level=settings.log_level,
        cache_ttl=settings.weather_cache_ttl,
        default_city=settings.default_city,
    )

    yield

    await app.state.weather_client.close()
    logger.info("application_shutdown")


app = FastAPI(
    title="Weather Dashboard API",
    description="Normalized current conditions, forecasts and alerts with caching and fallback",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors as 400 with an `error` field."""
    correlation_id = getattr(request.state, "correlation_id", None) or str(uuid4())
    logger = structlog.get_logger()

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning(
        "validation_error",
        correlation_id=correlation_id,
        detail=detail,
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": "Validation error",
            "detail": detail,
            "correlation_id": correlation_id,
        },
        headers={"X-Correlation-Id": correlation_id},
    )


# CORS middleware for browser clients
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Correlation ID middleware for request tracking and observability
app.add_middleware(CorrelationIdMiddleware)

app.include_router(weather_proxy_router)
app.include_router(router)
