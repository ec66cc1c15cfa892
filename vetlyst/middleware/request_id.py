"""
Vetlyst Backend — Request ID Middleware
=========================================

What:  Tags each request with a short correlation id.
How:   Reuses the caller's X-Request-ID header when present, otherwise
       generates one; stores it in a ContextVar and echoes it back.
Who:   Read by the access logger and by every exception handler in main.py.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_CLIENT_ID_LENGTH = 64


def new_request_id() -> str:
    """Eight hex characters; enough to correlate log lines for one day of traffic."""
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns the request id.

    A client-supplied id is trusted only if it is short and non-empty;
    anything else is replaced so log lines stay readable.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        if incoming and len(incoming) <= MAX_CLIENT_ID_LENGTH:
            rid = incoming
        else:
            rid = new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response


def current_request_id(request: Request) -> str:
    """
    The id assigned to `request`.

    Read from request.state first: the state lives on the ASGI scope, so it
    is still there for handlers that run after the ContextVar was reset
    (the catch-all 500 handler runs in ServerErrorMiddleware).
    """
    return getattr(request.state, "request_id", "") or request_id_var.get("")
