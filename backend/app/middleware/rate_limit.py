"""
TIL Backend — Rate Limiting Middleware
=======================================

What:  Per-client-IP sliding window limiter. Runs inside RequestIDMiddleware
       and the access log, so rejected requests carry a request ID and are logged.
How:   SlidingWindow keeps a deque of request timestamps per IP. A request
       is rejected with 429 when the deque already holds `limit` timestamps
       younger than `window` seconds.

State lives on the middleware instance, i.e. one app in one process.
Multi-worker deployments therefore get one budget per worker.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class SlidingWindow:
    """Timestamps of recent requests, keyed by client."""

    # Full sweep of idle clients every this many hits
    SWEEP_EVERY = 1000

    def __init__(self) -> None:
        self._hits: Dict[str, Deque[float]] = {}
        self._since_sweep = 0

    def hit(self, key: str, limit: int, window: int, now: float) -> Optional[int]:
        """
        Record a request for `key` unless its budget is spent.

        Returns:
            None if the request is allowed, otherwise the number of seconds
            until the oldest counted request leaves the window.
        """
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= now - window:
            hits.popleft()

        if len(hits) >= limit:
            return int(hits[0] + window - now) + 1

        hits.append(now)
        self._since_sweep += 1
        if self._since_sweep >= self.SWEEP_EVERY:
            self._sweep(now - window)
        return None

    def _sweep(self, horizon: float) -> None:
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= horizon]
        for key in idle:
            del self._hits[key]
        self._since_sweep = 0
        if idle:
            logger.debug("Dropped rate-limit state for %d idle clients", len(idle))


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rejects clients that exceed `settings.rate_limit_requests` per
    `settings.rate_limit_window` seconds.

    Settings are read on every request. The 429 body is built here because
    exceptions raised in middleware never reach FastAPI's handlers.
    """

    # Health checks and docs stay reachable
    EXEMPT_PATHS = frozenset({"/health", "/docs", "/openapi.json", "/redoc"})

    def __init__(self, app, **kwargs):
        super().__init__(app, **kwargs)
        self.window = SlidingWindow()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        # Behind a proxy this is the proxy's address
        client_ip = request.client.host if request.client else "unknown"

        retry_after = self.window.hit(
            client_ip,
            limit=settings.rate_limit_requests,
            window=settings.rate_limit_window,
            now=time.monotonic(),
        )
        if retry_after is None:
            return await call_next(request)

        exc = RateLimitExceededError(retry_after=retry_after)
        logger.warning(
            "Rate limit hit by %s on %s %s (retry in %ds)",
            client_ip, request.method, request.url.path, retry_after,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.context,
                "request_id": request_id_var.get(""),
            },
            headers={"Retry-After": str(exc.retry_after)},
        )
