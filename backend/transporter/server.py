"""
Transporter Backend — Server Lifecycle Manager
================================================

What:  Runs the ASGI app under uvicorn and owns the start/stop contract.
Why:   The process must refuse to start if it cannot bind its port, must stop
       accepting connections as soon as SIGINT/SIGTERM arrives, and must give
       in-flight requests a bounded amount of time to finish.
How:   The listening socket is bound here (so a bind failure is an ordinary
       exception, not a sys.exit deep inside uvicorn), uvicorn serves on a
       background task, and the signal wait is the only blocking point.

State machine:
    STARTING ──bind ok, uvicorn started──▶ RUNNING
    STARTING ──bind failed──────────────▶ STOPPED   (exit 1, no signal wait)
    RUNNING  ──SIGINT/SIGTERM───────────▶ SHUTTING_DOWN ──▶ STOPPED
    RUNNING  ──server task ended────────▶ STOPPED   (exit 1)

Timeouts:
    idle       uvicorn keep-alive timeout (120s)
    shutdown   graceful window for in-flight requests (30s); requests still
               running afterwards are cancelled and run() returns 1
    read/write enforced per request by ConnectionTimeoutMiddleware
"""

import asyncio
import contextlib
import enum
import logging
import signal
import socket
from typing import Iterator, Optional

import uvicorn
from starlette.types import ASGIApp, Receive, Scope, Send

from transporter.exceptions import ServerStartupError

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ServerState(str, enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to ServerLifecycle."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class ServerLifecycle:
    """
    Start the listener, wait for a stop signal, shut down within a deadline.

    Usage:
        lifecycle = ServerLifecycle.from_settings(app, settings)
        exit_code = await lifecycle.run()
    """

    def __init__(
        self,
        app: ASGIApp,
        host: str = "0.0.0.0",
        port: int = 8000,
        idle_timeout: int = 120,
        shutdown_timeout: float = 30.0,
    ):
        self.app = app
        self.host = host
        self.port = port
        self.idle_timeout = idle_timeout
        self.shutdown_timeout = shutdown_timeout

        self.state = ServerState.STARTING
        self.bound_port: Optional[int] = None
        self.started = asyncio.Event()

        self._stop_requested = asyncio.Event()
        self._server: Optional[_Server] = None
        self._in_flight = 0
        self._abandoned = 0

    @classmethod
    def from_settings(cls, app: ASGIApp, settings) -> "ServerLifecycle":
        return cls(
            app,
            host=settings.host,
            port=settings.port,
            idle_timeout=settings.idle_timeout,
            shutdown_timeout=settings.shutdown_timeout,
        )

    # ── Public API ────────────────────────────────────────────────────────

    def request_shutdown(self, sig: Optional[signal.Signals] = None) -> None:
        """
        Begin graceful shutdown. Called by the signal handlers, or directly.

        A second request while already shutting down forces uvicorn to stop
        waiting for open connections.
        """
        if sig is not None:
            logger.info("Got signal: %s", sig.name)
        if self._stop_requested.is_set() and self._server is not None:
            logger.warning("Second stop request; forcing exit")
            self._server.force_exit = True
        self._stop_requested.set()

    async def run(self, install_signal_handlers: bool = True) -> int:
        """
        Serve until stopped and return the process exit status.

        Returns:
            0  clean shutdown
            1  bind failure, server failure, or graceful window exceeded
        """
        try:
            sock = self._bind()
        except ServerStartupError as e:
            logger.error("Error starting server: %s", e.message)
            self.state = ServerState.STOPPED
            return 1

        config = uvicorn.Config(
            self._tracked_app,
            interface="asgi3",
            lifespan="on",
            timeout_keep_alive=self.idle_timeout,
            timeout_graceful_shutdown=self.shutdown_timeout,
            # Root logging is configured by setup_logging; access lines come
            # from RequestLoggingMiddleware
            log_config=None,
            access_log=False,
        )
        self._server = _Server(config)

        loop = asyncio.get_running_loop()
        if install_signal_handlers:
            self._install_signal_handlers(loop)

        logger.info("Starting server on %s:%d", self.host, self.bound_port)
        serve_task = asyncio.create_task(self._server.serve(sockets=[sock]))
        try:
            return await self._supervise(serve_task)
        finally:
            if install_signal_handlers:
                self._remove_signal_handlers(loop)
            sock.close()
            self.state = ServerState.STOPPED

    # ── Internals ─────────────────────────────────────────────────────────

    def _bind(self) -> socket.socket:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
        except OSError as e:
            sock.close()
            raise ServerStartupError(
                message=f"could not bind {self.host}:{self.port}: {e.strerror or e}",
                context={"host": self.host, "port": self.port, "errno": e.errno},
            ) from e
        sock.set_inheritable(True)
        self.bound_port = sock.getsockname()[1]
        return sock

    async def _supervise(self, serve_task: asyncio.Task) -> int:
        startup_watch = asyncio.create_task(self._watch_startup())
        stop_wait = asyncio.create_task(self._stop_requested.wait())
        try:
            done, _ = await asyncio.wait(
                {serve_task, stop_wait}, return_when=asyncio.FIRST_COMPLETED
            )
            if serve_task in done:
                self._log_server_exit(serve_task)
                return 1

            # uvicorn skips its shutdown sequence if told to exit mid-startup
            await asyncio.wait(
                {startup_watch, serve_task}, return_when=asyncio.FIRST_COMPLETED
            )
            self.state = ServerState.SHUTTING_DOWN
            logger.info(
                "Shutting down; waiting up to %.0fs for in-flight requests",
                self.shutdown_timeout,
            )
            self._server.should_exit = True

            try:
                await serve_task
            except Exception as e:
                logger.error("Server failed during shutdown: %s", e, exc_info=True)
                return 1

            # Cancelled requests may still be unwinding when serve() returns
            abandoned = max(self._abandoned, self._in_flight)
            if abandoned:
                logger.error(
                    "Graceful shutdown timed out after %.0fs; %d request(s) cancelled",
                    self.shutdown_timeout,
                    abandoned,
                )
                return 1

            logger.info("Shutdown complete")
            return 0
        finally:
            startup_watch.cancel()
            stop_wait.cancel()

    async def _watch_startup(self) -> None:
        while not self._server.started:
            await asyncio.sleep(0.05)
        self.state = ServerState.RUNNING
        self.started.set()

    async def _tracked_app(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        self._in_flight += 1
        try:
            await self.app(scope, receive, send)
        except asyncio.CancelledError:
            if self.state is ServerState.SHUTTING_DOWN:
                self._abandoned += 1
            raise
        finally:
            self._in_flight -= 1

    def _log_server_exit(self, serve_task: asyncio.Task) -> None:
        if serve_task.cancelled():
            logger.error("Server task was cancelled")
            return
        exc = serve_task.exception()
        if exc is not None:
            logger.error("Server failed: %s", exc, exc_info=exc)
        else:
            logger.error("Server stopped without a shutdown request")

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in HANDLED_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig)
            except NotImplementedError:
                # Windows event loops have no add_signal_handler
                signal.signal(
                    sig,
                    lambda signum, frame: loop.call_soon_threadsafe(
                        self.request_shutdown, signal.Signals(signum)
                    ),
                )

    def _remove_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        for sig in HANDLED_SIGNALS:
            try:
                loop.remove_signal_handler(sig)
            except NotImplementedError:
                signal.signal(sig, signal.SIG_DFL)
