"""
Request logging middleware
"""

import json
import re
import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Substrings of query parameter names whose values are masked
SENSITIVE_KEYS = {
    "password",
    "token",
    "secret",
    "authorization",
    "jwt",
    "session",
    "cookie",
    "credentials",
}

# GraphQL-over-GET carries the whole document in the query string
GRAPHQL_PAYLOAD_KEYS = ("query", "variables", "extensions")

OPERATION_PATTERN = re.compile(r"\b(query|mutation)\s+(\w+)")


def sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Mask credentials and GraphQL payloads in query parameters before logging."""
    sanitized = {}
    for key, value in params.items():
        lowered = key.lower()
        if lowered in GRAPHQL_PAYLOAD_KEYS or any(s in lowered for s in SENSITIVE_KEYS):
            sanitized[key] = "[REDACTED]"
        else:
            sanitized[key] = value
    return sanitized


def operation_name_from_payload(data: dict[str, Any]) -> str | None:
    """Work out a loggable operation name from a GraphQL request payload."""
    name = data.get("operationName")
    if isinstance(name, str) and name:
        return name

    document = data.get("query")
    if not isinstance(document, str) or not document:
        return None
    if "__schema" in document or "IntrospectionQuery" in document:
        return "__introspection"

    match = OPERATION_PATTERN.search(document)
    if match is None:
        return "unnamed_operation"
    kind, name = match.groups()
    return f"mutation:{name}" if kind == "mutation" else name


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != "/graphql":
        return None

    if request.method == "GET":
        return operation_name_from_payload(dict(request.query_params))
    if request.method != "POST":
        return None

    body = await request.body()
    if not body:
        return None
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return operation_name_from_payload(data) if isinstance(data, dict) else None


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Give each request an id and log its start, completion and duration."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = set_request_context(request.headers.get(REQUEST_ID_HEADER))
        started = time.perf_counter()
        operation = await extract_graphql_operation_name(request)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=sanitize_query_params(dict(request.query_params)) or None,
            graphql_operation=operation,
            remote_addr=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                graphql_operation=operation,
                error=str(e),
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
                graphql_operation=operation,
            )
            return response
        finally:
            clear_request_context()
