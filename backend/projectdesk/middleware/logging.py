"""
Projectdesk Backend — Request Logging Middleware
==================================================

What:  One access log line per request: method, path, status, duration,
       request ID and client address.
How:   Timed around call_next(); the level follows the status class
       (5xx ERROR, 4xx WARNING, otherwise INFO). /health is not logged.

Request bodies are never logged; project and customer details stay out of
the access log.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from projectdesk.middleware.request_id import request_id_var

logger = logging.getLogger("projectdesk.access")

_UNLOGGED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _UNLOGGED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        status = response.status_code

        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
