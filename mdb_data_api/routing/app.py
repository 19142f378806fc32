"""
FastAPI application factory for the Data API.

The factory builds the ConnectionManager and handlers once, stores them on
``app.state`` and closes the connection when the lifespan ends (uvicorn
runs the lifespan exit after SIGINT/SIGTERM).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config import ServerSettings
from ..constants import REQUEST_ID_HEADER, SERVICE_NAME, SERVICE_VERSION
from ..core.connection import ConnectionManager
from ..handlers.operations import DataApiHandlers
from ..observability import begin_request, current_request, end_request
from .routes import router

logger = logging.getLogger(__name__)


def create_app(
    settings: ServerSettings | None = None,
    connection_manager: ConnectionManager | None = None,
) -> FastAPI:
    """
    Create the Data API application.

    Args:
        settings: Server settings (read from the environment if omitted)
        connection_manager: Pre-built ConnectionManager (built from
            ``settings.connection`` if omitted)

    Returns:
        Configured FastAPI application
    """
    settings = settings or ServerSettings.from_env()
    settings.validate()
    connection_manager = connection_manager or ConnectionManager(settings.connection)
    handlers = DataApiHandlers(
        connection_manager, coerce_object_ids=settings.coerce_object_ids
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not settings.mongodb_uri:
            logger.warning("MONGODB_URI is not set; /action requests will fail")
        logger.info(f"Data API ready on http://{settings.host}:{settings.port}")
        logger.info(f"Health check: http://{settings.host}:{settings.port}/health")
        yield
        # In-flight requests still running past the graceful timeout have
        # been cancelled by now; their driver calls fail against a closed client.
        logger.info("Shutting down, closing MongoDB connection...")
        await connection_manager.close()

    app = FastAPI(
        title=SERVICE_NAME,
        version=SERVICE_VERSION,
        description="Atlas Data API compatible HTTP facade over MongoDB",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connection_manager = connection_manager
    app.state.handlers = handlers

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next):
        token = begin_request(request.headers.get(REQUEST_ID_HEADER))
        correlation_id = current_request().correlation_id
        try:
            response = await call_next(request)
        finally:
            end_request(token)
        response.headers[REQUEST_ID_HEADER] = correlation_id
        return response

    app.include_router(router)
    return app
