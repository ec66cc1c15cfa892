"""
Vetlyst Backend — Access Logging Middleware
=============================================

What:  One log line per HTTP request on the "vetlyst.access" logger.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client IP. Level follows the status class.

Privacy:
    Form bodies carry owner names, phone numbers and pet details, so request
    bodies and query strings are never logged. Only the path is.

Example:
    2024-03-18T09:12:44 [INFO] vetlyst.access: POST /api/claim-clinic 200 41.3ms [3f9a1c02] from 10.0.0.7
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from vetlyst.middleware.request_id import request_id_var

logger = logging.getLogger("vetlyst.access")

# Load balancer probes hit these every few seconds
QUIET_PATHS = frozenset({"/health"})


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log for everything except QUIET_PATHS."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        logger.log(
            _level_for(status),
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
                "client_ip": client_ip,
            },
        )
        return response
