"""
RestBuddy: Request Context Middleware
=======================================

What:  Tags every request with a correlation ID and writes one access line
       once the request has been served.
How:   The ID comes from the client's X-Request-ID header or a fresh short
       UUID. It is stored in a ContextVar for loggers and exception
       handlers, and echoed back in the response header.

       The dispatcher records what it resolved on `request.state`
       (`resource` and `request_type`), so dispatched requests are logged
       with the operation they ran:

           GET /users/7 users:show 404 2.3ms [a1b2c3d4]
           PATCH /posts/1 posts:update 200 5.8ms [req-42]
           GET /docs - 200 0.9ms [9f0e1d2c]

Log level by status: 5xx ERROR, 4xx WARNING, otherwise INFO.
"""

import logging
import time
import uuid
from contextvars import ContextVar
from typing import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("restbuddy.access")


def status_log_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def describe_operation(request: Request) -> str:
    """"users:show" for dispatched requests, "-" for everything else."""
    resource = getattr(request.state, "resource", None)
    request_type = getattr(request.state, "request_type", None)
    if resource is None or request_type is None:
        return "-"
    return f"{resource}:{request_type}"


class RequestContextMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, quiet_paths: Iterable[str] = ("/health",)) -> None:
        super().__init__(app)
        # Health checks would drown everything else
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid

        if request.url.path not in self.quiet_paths:
            self._log_access(request, response.status_code, started, rid)
        return response

    def _log_access(self, request: Request, status: int, started: float, rid: str) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        operation = describe_operation(request)
        access_logger.log(
            status_log_level(status),
            "%s %s %s %d %.1fms [%s]",
            request.method,
            request.url.path,
            operation,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "operation": operation,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
