"""FastAPI application factory.

create_app() returns a configured FastAPI instance. The lifespan logs
startup/shutdown and disposes the database engine. Middleware, CORS,
domain error handlers, and routers are all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from messagely import __version__
from messagely.api import api_router
from messagely.api.errors import register_error_handlers
from messagely.config import settings
from messagely.middleware.request_id import RequestIdMiddleware
from messagely.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "messagely.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    logger.info("messagely.shutdown")

    from messagely.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="Messagely",
        description="Person-to-person messaging with read receipts",
        version=__version__,
        lifespan=lifespan,
    )

    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: messagely.main:app)
app = create_app()
