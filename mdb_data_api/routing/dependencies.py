"""
FastAPI dependencies for the Data API.

Every collaborator lives on ``app.state``; routes receive them through
``Depends`` instead of module globals.
"""

from fastapi import HTTPException, Request

from ..config import ServerSettings
from ..core.connection import ConnectionManager
from ..handlers.operations import DataApiHandlers


async def get_settings(request: Request) -> ServerSettings:
    """Get the server settings from app state."""
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(503, "Settings not initialized")
    return settings


async def get_connection_manager(request: Request) -> ConnectionManager:
    """Get the ConnectionManager instance from app state."""
    manager = getattr(request.app.state, "connection_manager", None)
    if manager is None:
        raise HTTPException(503, "Connection manager not initialized")
    return manager


async def get_handlers(request: Request) -> DataApiHandlers:
    """Get the Data API handlers from app state."""
    handlers = getattr(request.app.state, "handlers", None)
    if handlers is None:
        raise HTTPException(503, "Handlers not initialized")
    return handlers
