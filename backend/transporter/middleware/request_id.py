"""
Transporter Backend — Request ID Middleware
=============================================

What:  Tags every request with a short correlation ID and echoes it back.
Why:   Error bodies and log lines carry the same ID, so a client report can be
       matched to the server log without guessing by timestamp.
How:   Reuses the client's X-Request-ID if sent, otherwise generates one; stores
       it in a ContextVar for loggers and exception handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a request ID and adds it to the response headers.

    8 hex chars are enough to correlate within a log window and stay readable.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
