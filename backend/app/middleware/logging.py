"""
TIL Backend — Access Log Middleware
====================================

What:  Writes one line to the "til.access" logger per request.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Line format:
    GET /api/acronyms/ 200 3.1ms [a1b2c3d4] from 127.0.0.1

Bodies and Authorization headers are never logged. /health is skipped
because orchestrators poll it every few seconds.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

access_logger = logging.getLogger("til.access")

SKIP_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    """ERROR for 5xx, WARNING for 4xx, INFO otherwise."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIP_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        client_ip = request.client.host if request.client else "unknown"
        access_logger.log(
            level_for_status(response.status_code),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            rid,
            client_ip,
            extra={"request_id": rid, "duration_ms": round(elapsed_ms, 2)},
        )
        return response
