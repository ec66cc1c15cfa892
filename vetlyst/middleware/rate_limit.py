"""
Vetlyst Backend — Rate Limiting Middleware
============================================

What:  Per-IP sliding window limit on the submission forms.
Why:   The two public forms write rows and send email; a bot posting in a
       loop would fill the tables and burn the email quota.
How:   Keeps recent POST timestamps per client IP in memory. Directory
       reads (GET) are never counted. When a client has RATE_LIMIT_REQUESTS timestamps inside the last
       RATE_LIMIT_WINDOW seconds, the request is answered with 429.

Limitations:
    State lives in the process. Each uvicorn worker counts separately, and
    behind a proxy every client shares the proxy's IP unless uvicorn is run
    with --proxy-headers.
"""

import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from vetlyst.config import settings
from vetlyst.exceptions import RateLimitExceededError
from vetlyst.middleware.request_id import current_request_id

logger = logging.getLogger(__name__)

# Sweep idle IPs after this many recorded requests
CLEANUP_EVERY = 1000


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding window limiter keyed by client IP.

    Only writes under /api are counted. Browsing the directory, health
    checks and the docs are always reachable.
    """

    LIMITED_PREFIX = "/api"
    LIMITED_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

    def __init__(
        self,
        app,
        max_requests: Optional[int] = None,
        window_seconds: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests or settings.rate_limit_requests
        self.window_seconds = window_seconds or settings.rate_limit_window
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._recorded = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.is_limited(request):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        try:
            self.check(client_ip, time.time())
        except RateLimitExceededError as exc:
            # Raised outside the router, so the app's exception handlers never see it
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": current_request_id(request),
                },
                headers={"Retry-After": str(exc.retry_after)},
            )
        return await call_next(request)

    def is_limited(self, request: Request) -> bool:
        return (
            request.method in self.LIMITED_METHODS
            and request.url.path.startswith(self.LIMITED_PREFIX)
        )

    def check(self, client_ip: str, now: float) -> None:
        """Record a hit for client_ip, or raise RateLimitExceededError."""
        window_start = now - self.window_seconds
        hits = self._hits[client_ip]
        while hits and hits[0] <= window_start:
            hits.popleft()

        if len(hits) >= self.max_requests:
            retry_after = int(hits[0] + self.window_seconds - now) + 1
            logger.warning(
                "Rate limit exceeded for IP %s: %d requests in %ds window",
                client_ip,
                len(hits),
                self.window_seconds,
            )
            raise RateLimitExceededError(retry_after=retry_after)

        hits.append(now)
        self._recorded += 1
        if self._recorded % CLEANUP_EVERY == 0:
            self._forget_idle(window_start)

    def _forget_idle(self, window_start: float) -> None:
        idle = [ip for ip, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for ip in idle:
            del self._hits[ip]
        if idle:
            logger.debug("Dropped %d idle rate limit entries", len(idle))
