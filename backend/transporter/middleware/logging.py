"""
Transporter Backend — Access Log Middleware
=============================================

What:  One access log line per HTTP request.
How:   Times the downstream call and logs method, path, status, duration and
       request ID. Responses produced by the connection deadlines are tagged
       so they can be told apart from handler errors with the same status.

Log level by status class:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Bodies and client addresses are not logged (driver records hold personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from transporter.middleware.request_id import request_id_var

logger = logging.getLogger("transporter.access")

# Probed every few seconds by the orchestrator
QUIET_PATHS = {"/health"}

DEADLINE_TAGS = {408: " (read deadline)", 503: " (write deadline or store down)"}


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        status = response.status_code
        logger.log(
            level_for(status),
            "%s %s %d %.1fms [%s]%s",
            request.method,
            request.url.path,
            status,
            elapsed_ms,
            request_id_var.get(""),
            DEADLINE_TAGS.get(status, ""),
        )
        return response
