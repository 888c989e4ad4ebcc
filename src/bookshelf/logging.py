"""
Structured logging for the Bookshelf service.

Every log line carries the id of the HTTP request it belongs to and, once the
bearer token has been resolved, the id of the signed-in user. Credentials are
masked before rendering.
"""

import logging
import secrets
import sys
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_ctx: ContextVar[str | None] = ContextVar("user_id", default=None)

# Event keys whose values must never reach a log sink
CREDENTIAL_KEYS = frozenset({"password", "token", "authorization", "jwt_secret"})


def add_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Copy the current request and user ids into the event."""
    _ = logger, method_name

    request_id = request_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    user_id = user_id_ctx.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)

    return event_dict


def mask_credentials(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    _ = logger, method_name
    for key in CREDENTIAL_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = "[REDACTED]"
    return event_dict


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog on top of the stdlib root logger.

    Args:
        debug: Render colored console output instead of JSON lines
        level: Level name such as "INFO"; defaults to DEBUG in debug mode
    """
    if level is None:
        log_level = logging.DEBUG if debug else logging.INFO
    else:
        log_level = logging.getLevelName(level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s", force=True)

    renderer = structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            mask_credentials,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None) -> str:
    """Start the logging context of a new request and return its id."""
    request_id = request_id or secrets.token_urlsafe(10)
    request_id_ctx.set(request_id)
    user_id_ctx.set(None)
    return request_id


def bind_user_id(user_id: str | None) -> None:
    """Attach the authenticated user to log records of the current request."""
    user_id_ctx.set(user_id)


def clear_request_context() -> None:
    request_id_ctx.set(None)
    user_id_ctx.set(None)
