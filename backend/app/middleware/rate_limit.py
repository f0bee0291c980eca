"""
DogAdopt Backend — Rate Limiting Middleware
=============================================

What:  Per-IP sliding window limit on /api/* routes
       (default 100 requests per 15 minutes).
How:   Keeps recent request timestamps per client IP in memory. When the
       window is full the request is answered with 429 in the standard
       error envelope plus a Retry-After header.

Algorithm: Sliding Window Log
    1. Drop timestamps older than `window` seconds
    2. If `requests` remain, reject; Retry-After is when the oldest expires
    3. Otherwise record now and pass the request on

Scope:
    State is per process. Multiple workers each enforce their own window.
"""

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

LIMITED_PREFIX = "/api"
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Args:
        requests: max requests per client IP inside one window
        window:   window length in seconds
    """

    def __init__(self, app, requests: int = 100, window: int = 900):
        super().__init__(app)
        self.requests = requests
        self.window = window
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not request.url.path.startswith(LIMITED_PREFIX):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - self.window

        hits = [ts for ts in self._hits[client_ip] if ts > window_start]
        self._hits[client_ip] = hits

        if len(hits) >= self.requests:
            retry_after = int(hits[0] + self.window - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(hits),
                self.window,
            )
            return self._reject(RateLimitExceededError(retry_after=retry_after))

        hits.append(now)

        self._seen += 1
        if self._seen % CLEANUP_EVERY == 0:
            self._cleanup_inactive_ips(window_start)

        return await call_next(request)

    @staticmethod
    def _reject(exc: RateLimitExceededError) -> JSONResponse:
        # Raised errors here would bypass the app's exception handlers
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.message,
                "error": exc.code,
                "request_id": request_id_var.get("") or None,
            },
            headers={"Retry-After": str(exc.retry_after)},
        )

    def _cleanup_inactive_ips(self, window_start: float) -> None:
        """Forget IPs with no request inside the current window."""
        inactive_ips = [
            ip for ip, timestamps in self._hits.items()
            if not timestamps or timestamps[-1] < window_start
        ]
        for ip in inactive_ips:
            del self._hits[ip]

        if inactive_ips:
            logger.debug("Cleaned up %d inactive IP entries", len(inactive_ips))
