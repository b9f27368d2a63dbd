"""
Transporter Backend — Connection Timeout Middleware
=====================================================

What:  Per-request read and write deadlines.
Why:   uvicorn only offers a keep-alive (idle) timeout. A client that trickles
       its body, or a handler stuck on a slow query, would otherwise hold a
       connection and a pool slot indefinitely.
How:   Pure ASGI middleware (not BaseHTTPMiddleware) because it has to wrap
       `receive` itself:

       read_timeout   The request body must be fully received within this
                      many seconds of the request starting → 408 otherwise.
       write_timeout  The application must finish within this many seconds
                      → 503 if no response has started yet; if it has, the
                      response is abandoned and the server closes the
                      connection.
"""

import asyncio
import logging

from fastapi import HTTPException
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from transporter.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


class ConnectionTimeoutMiddleware:
    """Enforces read and write deadlines on every HTTP request."""

    def __init__(self, app: ASGIApp, read_timeout: float = 5.0, write_timeout: float = 10.0):
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        loop = asyncio.get_running_loop()
        read_deadline = loop.time() + self.read_timeout
        body_received = False
        response_started = False

        async def timed_receive() -> Message:
            nonlocal body_received
            if body_received:
                return await receive()
            remaining = max(read_deadline - loop.time(), 0)
            try:
                message = await asyncio.wait_for(receive(), timeout=remaining)
            except asyncio.TimeoutError:
                # HTTPException passes through FastAPI's body parsing untouched
                # and is rendered by the exception middleware
                raise HTTPException(status_code=408, detail="Timed out reading request body")
            if message["type"] != "http.request" or not message.get("more_body", False):
                body_received = True
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        # Only our own deadline becomes a 503; exceptions from the app,
        # TimeoutError included, propagate unchanged
        app_task = asyncio.ensure_future(self.app(scope, timed_receive, tracking_send))
        try:
            done, _ = await asyncio.wait({app_task}, timeout=self.write_timeout)
        except asyncio.CancelledError:
            app_task.cancel()
            raise

        if app_task in done:
            app_task.result()
            return

        app_task.cancel()
        try:
            await app_task
        except asyncio.CancelledError:
            pass

        path = scope.get("path", "")
        if response_started:
            logger.warning(
                "Write timeout after %.1fs on %s; response abandoned mid-stream",
                self.write_timeout, path,
            )
            return
        logger.warning("Write timeout after %.1fs on %s", self.write_timeout, path)
        response = JSONResponse(
            status_code=503,
            content={
                "error": "timeout",
                "message": "The server did not finish the request in time.",
                "request_id": request_id_var.get(""),
            },
        )
        await response(scope, receive, send)
