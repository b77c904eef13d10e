# app/main.py

"""
FastAPI application factory.

Builds the process-wide field encryption service, wires middleware and
exception handlers, and runs the token blacklist maintenance at startup.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.configuration.config import settings
from app.adapters.inbound.api.v1.router import api_router
from app.adapters.outbound.persistence.database import AsyncSessionLocal, engine
from app.adapters.outbound.security.field_encryption import FieldEncryptionService
from app.application.use_cases.token_blacklist_use_cases import (
    blacklist_cleanup_loop,
    initialize_blacklist,
)
from app.shared.middleware import (
    AsyncRequestLoggingMiddleware,
    ErrorHandlerMiddleware,
    register_exception_handlers,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")

    await initialize_blacklist(engine, AsyncSessionLocal)

    cleanup_task = None
    if settings.BLACKLIST_CLEANUP_INTERVAL_MINUTES > 0:
        cleanup_task = asyncio.create_task(
            blacklist_cleanup_loop(AsyncSessionLocal, settings.BLACKLIST_CLEANUP_INTERVAL_MINUTES)
        )

    yield

    # Shutdown
    logger.info("Shutting down...")
    if cleanup_task is not None:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.SCHEMA_VISIBILITY else None,
        redoc_url="/redoc" if settings.SCHEMA_VISIBILITY else None,
        openapi_url="/openapi.json" if settings.SCHEMA_VISIBILITY else None,
    )

    # Um único serviço de criptografia por processo, injetado via Depends
    app.state.field_encryption = FieldEncryptionService.from_settings(settings)

    register_exception_handlers(app)

    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(AsyncRequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Access-Token"],
    )

    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
