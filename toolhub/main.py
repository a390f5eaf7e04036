import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, preferences, rates
from .services.preferences import PreferenceStore
from .services.rates.base import RateProvider
from .services.rates.providers import ExternalHTTPRateProvider
from .services.rates.scheduler import RefreshScheduler
from .services.rates.store import RateStore

logger = logging.getLogger("toolhub")


def create_app(
    settings_override: Settings | None = None,
    rate_provider: RateProvider | None = None,
) -> FastAPI:
    """Application factory and composition root.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    rate_provider: replaces the HTTP provider (tests inject stubs).

    The rate store, preference store and refresh scheduler are created here and
    exposed to handlers through app.state; nothing is module-global.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    store = RateStore()
    provider = rate_provider or ExternalHTTPRateProvider(str(settings.exchange_api_url))
    scheduler = RefreshScheduler(
        store,
        provider,
        supported_currencies=settings.supported_currencies,
        interval_seconds=settings.rates_refresh_interval_seconds,
        max_attempts=settings.rates_retry_attempts,
        base_delay=settings.rates_retry_base_delay_seconds,
        fetch_timeout=settings.http_timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await provider.aclose()
            logger.info("rate refresh stopped")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_store = store
    app.state.rate_scheduler = scheduler
    app.state.preference_store = PreferenceStore()

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(preferences.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
