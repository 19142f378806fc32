"""
Data API routes.

``POST /action/{actionName}`` runs one of the nine data operations;
``GET /health``, ``GET /`` and ``GET /metrics`` report service state.

Request pipeline for actions (single pass, in this order):
1. envelope validation            -> 400 INVALID_REQUEST
2. lazy connect                   -> 500 MONGODB_URI_MISSING
3. action presence                -> 400 MISSING_ACTION
4. action lookup                  -> 400 INVALID_ACTION
5. handler result                 -> 200, or 400 with the handler's error
6. anything unexpected            -> 500 INTERNAL_ERROR (logged)
"""

import logging
from typing import Any

from bson.errors import BSONError
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..config import ServerSettings
from ..constants import (
    ERROR_INTERNAL,
    ERROR_INVALID_ACTION,
    ERROR_INVALID_REQUEST,
    ERROR_MISSING_ACTION,
    ERROR_MONGODB_URI_MISSING,
    REQUIRED_ENVELOPE_FIELDS,
    SERVICE_FRAMEWORK,
    SERVICE_NAME,
    SERVICE_VERSION,
    SUPPORTED_ACTIONS,
)
from ..core.connection import ConnectionManager
from ..handlers.operations import DataApiHandlers
from ..observability import (
    bind_action,
    build_health_report,
    end_request,
    get_metrics_collector,
)
from ..observability import get_logger as get_contextual_logger
from ..utils.mongo import parse_extended_json
from .dependencies import get_connection_manager, get_handlers, get_settings

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

router = APIRouter()


def error_response(status_code: int, message: str, error_code: str) -> JSONResponse:
    return JSONResponse({"error": message, "error_code": error_code}, status_code=status_code)


def validate_envelope(body: Any) -> str | None:
    """
    Check the envelope's routing fields.

    Returns:
        An error message, or None when the envelope is usable
    """
    if not isinstance(body, dict):
        return "Request body must be a JSON object"
    for field_name in REQUIRED_ENVELOPE_FIELDS:
        if not body.get(field_name):
            return f"Missing required field: {field_name}"
    for field_name in ("database", "collection"):
        if not isinstance(body[field_name], str):
            return f"Invalid field type: {field_name} must be a string"
    return None


async def read_body(request: Request) -> Any:
    """
    Decode the request body as Extended JSON.

    Returns:
        The decoded value, or None if the body is empty or not valid JSON
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return parse_extended_json(raw)
    except (ValueError, TypeError, BSONError) as e:
        logger.debug(f"Rejected request body: {e}")
        return None


async def dispatch_action(
    request: Request,
    action: str | None,
    settings: ServerSettings,
    connection_manager: ConnectionManager,
    handlers: DataApiHandlers,
) -> JSONResponse:
    """Run the action pipeline for one request."""
    token = None
    try:
        body = await read_body(request)
        validation_error = validate_envelope(body)
        if validation_error:
            return error_response(400, validation_error, ERROR_INVALID_REQUEST)

        if not connection_manager.is_connected():
            if not settings.mongodb_uri:
                return error_response(
                    500, "MongoDB URI not configured", ERROR_MONGODB_URI_MISSING
                )
            await connection_manager.connect(settings.mongodb_uri)

        if not action:
            return error_response(
                400, "Action not specified in URL path.", ERROR_MISSING_ACTION
            )

        handler = handlers.get_handler(action)
        if handler is None:
            return error_response(400, f"Unknown action: {action}", ERROR_INVALID_ACTION)

        token = bind_action(action, body)
        result = await handler(body)
        return JSONResponse(result.to_dict(), status_code=200 if result.ok else 400)
    except Exception:
        # Top-level guard: clients only ever see a generic message
        contextual_logger.exception("Unhandled error")
        return error_response(500, "Internal server error", ERROR_INTERNAL)
    finally:
        if token is not None:
            end_request(token)


@router.post("/action/{action_name}")
async def run_action(
    action_name: str,
    request: Request,
    settings: ServerSettings = Depends(get_settings),
    connection_manager: ConnectionManager = Depends(get_connection_manager),
    handlers: DataApiHandlers = Depends(get_handlers),
) -> JSONResponse:
    """Run a Data API action (findOne, find, insertOne, ...)."""
    return await dispatch_action(request, action_name, settings, connection_manager, handlers)


@router.post("/action", include_in_schema=False)
@router.post("/action/", include_in_schema=False)
async def run_missing_action(
    request: Request,
    settings: ServerSettings = Depends(get_settings),
    connection_manager: ConnectionManager = Depends(get_connection_manager),
    handlers: DataApiHandlers = Depends(get_handlers),
) -> JSONResponse:
    return await dispatch_action(request, None, settings, connection_manager, handlers)


@router.get("/health")
async def health(
    connection_manager: ConnectionManager = Depends(get_connection_manager),
) -> dict[str, Any]:
    """Liveness check. Never touches the database."""
    return build_health_report(connection_manager)


@router.get("/")
async def root() -> dict[str, Any]:
    """Static service descriptor."""
    return {
        "message": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "framework": SERVICE_FRAMEWORK,
        "endpoints": {
            "health": "/health",
            "metrics": "/metrics",
            "dataOperations": "/action/{actionName}",
            "supportedActions": list(SUPPORTED_ACTIONS),
        },
    }


@router.get("/metrics")
async def metrics() -> dict[str, Any]:
    """In-process operation metrics summary."""
    return get_metrics_collector().get_summary()
