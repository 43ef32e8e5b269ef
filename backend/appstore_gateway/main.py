"""App Store Gateway — FastAPI application entry point.

Invariants:
    - Settings loaded once; the API key reaches the middleware only through KeyValidator
    - Missing API_KEY stops the process before uvicorn binds a port
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GatewayError → {"error": message}
    - The default store client is opened and closed by the lifespan

Design Decisions:
    - Application factory over a module-level app: importing the package never
      requires configuration, tests build apps with fake stores
    - Auth middleware added before CORS so CORS is outermost and preflight
      requests are answered without a key
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from appstore_gateway import __version__
from appstore_gateway.api.auth import ApiKeyMiddleware
from appstore_gateway.api.error_handlers import register_error_handlers
from appstore_gateway.api.routes import health, store
from appstore_gateway.config import Settings, get_settings
from appstore_gateway.core.authorize import KeyValidator
from appstore_gateway.core.errors import ConfigurationError
from appstore_gateway.core.store_protocols import AppStore
from appstore_gateway.infrastructure.itunes_client import ITunesStoreClient
from appstore_gateway.infrastructure.observability import setup_logging
from appstore_gateway.services.operation_dispatch import OperationDispatch

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, store_client: AppStore | None = None,
) -> FastAPI:
    """Build the gateway. Raises ConfigurationError when settings are invalid."""
    settings = settings or get_settings()
    owned_client = None
    if store_client is None:
        owned_client = ITunesStoreClient(
            timeout_seconds=settings.store_timeout_seconds,
            default_country=settings.store_default_country,
        )
        store_client = owned_client

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        logger.info(f"App Store Gateway started on port {settings.port}")
        yield
        if owned_client is not None:
            await owned_client.aclose()
        logger.info("App Store Gateway shutting down")

    app = FastAPI(
        title="App Store Gateway", version=__version__, lifespan=lifespan,
    )
    app.state.dispatch = OperationDispatch(store_client)

    app.add_middleware(ApiKeyMiddleware, validator=KeyValidator(settings.api_key))
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    app.include_router(health.router)
    app.include_router(store.router)

    register_error_handlers(app)
    return app


def run() -> None:
    """Console entry point: load settings, then serve with uvicorn."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.critical(e.message, extra={"error_code": e.code})
        sys.exit(1)
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
