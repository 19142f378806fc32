"""
Request-scoped logging for MDB_DATA_API.

Each HTTP request gets a RequestContext holding its correlation id (the
incoming ``X-Request-ID`` header or a generated one). Once the envelope has
been validated the router binds the action and its target namespace to the
same context. Loggers obtained from ``get_logger`` copy those fields onto
every record written while the request is running.
"""

import contextvars
import logging
import sys
import uuid
from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class RequestContext:
    """What the current request is, as far as it is known so far."""

    correlation_id: str
    action: str | None = None
    database: str | None = None
    collection: str | None = None

    def log_fields(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_request_context: contextvars.ContextVar[RequestContext | None] = contextvars.ContextVar(
    "request_context", default=None
)


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure root logging for the server process.

    Args:
        level: Log level name or number
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout, force=True)


def _new_correlation_id() -> str:
    return uuid.uuid4().hex


def begin_request(correlation_id: str | None = None) -> contextvars.Token:
    """
    Start the context of one HTTP request.

    Args:
        correlation_id: Caller-supplied request id; generated when empty

    Returns:
        Token to hand to ``end_request``
    """
    context = RequestContext(correlation_id=correlation_id or _new_correlation_id())
    return _request_context.set(context)


def bind_action(action: str, envelope: Mapping[str, Any]) -> contextvars.Token:
    """
    Attach the action and the envelope's namespace to the current request.

    The envelope must already have passed validation.

    Returns:
        Token to hand to ``end_request``
    """
    current = _request_context.get() or RequestContext(correlation_id=_new_correlation_id())
    bound = replace(
        current,
        action=action,
        database=envelope["database"],
        collection=envelope["collection"],
    )
    return _request_context.set(bound)


def end_request(token: contextvars.Token) -> None:
    """Restore the context that was active before ``begin_request``/``bind_action``."""
    _request_context.reset(token)


def current_request() -> RequestContext | None:
    return _request_context.get()


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds the current RequestContext to every record."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = _request_context.get()
        fields = context.log_fields() if context else {}
        fields.update(kwargs.get("extra") or {})
        kwargs["extra"] = fields
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """Module logger wrapped in a ContextualLoggerAdapter."""
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_action(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    duration_ms: float,
    error_code: str | None = None,
) -> None:
    """
    Write the one log line each handled action produces.

    Successful actions log at DEBUG; failed ones at WARNING with their
    error code.

    Args:
        logger: Logger to write to (usually a ContextualLoggerAdapter)
        operation: Metric-style operation name, e.g. ``action.findOne``
        duration_ms: Time spent in the handler
        error_code: Error code of a failed action, None on success
    """
    extra: dict[str, Any] = {"operation": operation, "duration_ms": round(duration_ms, 2)}
    if error_code is None:
        logger.debug(f"{operation} succeeded in {duration_ms:.2f}ms", extra=extra)
        return

    extra["error_code"] = error_code
    logger.warning(f"{operation} failed with {error_code} in {duration_ms:.2f}ms", extra=extra)
