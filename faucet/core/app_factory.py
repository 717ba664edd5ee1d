"""Application factory for the faucet API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from faucet.api.routes import faucet_router, health_router
from faucet.api.routes.faucet import close_clients
from faucet.core.config import settings
from faucet.core.exception_handlers import setup_exception_handlers
from faucet.core.logging import configure_logging
from faucet.core.middleware import request_id_middleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_clients()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Faucet API",
        description=(
            "Token faucet. Claims are limited to one per cooldown window per "
            "address and per client IP; failed payouts do not count."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(faucet_router)
    app.include_router(health_router)

    return app
