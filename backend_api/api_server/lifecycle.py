"""
Server lifecycle — bind, serve, and drain on SIGINT/SIGTERM.

States: STOPPED → STARTING → RUNNING → SHUTTING_DOWN → STOPPED.

The listener socket is bound up front so a bind failure is reported before
uvicorn starts. uvicorn's exit-signal handler only flips a flag here; the
lifecycle coroutine then tells uvicorn to stop accepting and waits for the
serve task, bounded by settings.shutdown_timeout. One shutdown per lifecycle;
repeated signals are ignored.
Per-request read and write deadlines come from DeadlineH11Protocol.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import signal
import socket
from enum import Enum
from types import FrameType
from typing import Any, Callable

import uvicorn

from backend_api.api_logging import configure_structlog, get_logger
from backend_api.api_server.protocol import DeadlineH11Protocol
from backend_api.config import Settings, get_settings
from backend_api.core.exceptions import BindError, ServerError, ShutdownTimeoutError

# Poll interval for the shutdown flag (uvicorn's own main loop ticks at 0.1s)
TICK_SEC = 0.1


class ServerState(str, Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


def bind_listener(host: str, port: str) -> socket.socket:
    """
    Bind a TCP socket on host:port and return it (not yet listening).

    Raises:
        BindError: port is not an integer, out of range, or unavailable.
    """
    try:
        port_number = int(port)
    except (TypeError, ValueError) as e:
        raise BindError(f"invalid port {port!r}") from e

    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port_number))
    except (OSError, OverflowError) as e:
        sock.close()
        raise BindError(f"cannot bind {host}:{port}: {e}") from e
    sock.set_inheritable(True)
    return sock


class SignalAwareServer(uvicorn.Server):
    """uvicorn server that forwards SIGINT/SIGTERM to a callback instead of exiting itself."""

    def __init__(self, config: uvicorn.Config, on_exit_signal: Callable[[int], None]) -> None:
        super().__init__(config)
        self._on_exit_signal = on_exit_signal

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        self._on_exit_signal(sig)


class ServerLifecycle:
    """
    Run an ASGI app under uvicorn with a bounded graceful shutdown.

    Usage:
        lifecycle = ServerLifecycle(app, settings, logger)
        asyncio.run(lifecycle.run())
    """

    def __init__(self, app: Any, settings: Settings, logger: Any = None) -> None:
        self.app = app
        self.settings = settings
        self.logger = logger or get_logger("http")
        self.state = ServerState.STOPPED
        self.server = SignalAwareServer(self._build_config(), on_exit_signal=self.request_shutdown)
        self._socket: socket.socket | None = None
        self._shutdown_requested = False
        self._shutdown_signal: int | None = None

    def _build_config(self) -> uvicorn.Config:
        return uvicorn.Config(
            self.app,
            http=functools.partial(
                DeadlineH11Protocol,
                read_timeout=self.settings.read_timeout,
                write_timeout=self.settings.write_timeout,
                logger=self.logger,
            ),
            timeout_keep_alive=int(self.settings.idle_timeout),
            # Drain bound is enforced by run(), not by uvicorn
            timeout_graceful_shutdown=None,
            access_log=False,
            log_level=getattr(logging, self.settings.log_level.upper(), logging.INFO),
        )

    @property
    def port(self) -> int | None:
        """Bound port (useful when settings.port is "0"), or None before bind."""
        if self._socket is None:
            return None
        return self._socket.getsockname()[1]

    def request_shutdown(self, sig: int | None = None) -> None:
        """Ask the running server to shut down. Only the first request counts."""
        if self._shutdown_requested:
            return
        self._shutdown_requested = True
        self._shutdown_signal = sig

    async def run(self) -> None:
        """
        Bind, serve until a shutdown request, then drain.

        Raises:
            BindError: listener could not be bound.
            ShutdownTimeoutError: in-flight requests outlived shutdown_timeout.
        """
        self._socket = bind_listener(self.settings.host, self.settings.port)
        self.state = ServerState.STARTING
        self.logger.info("server_starting", address=self.settings.address, port=self.port)

        serve_task = asyncio.create_task(self.server.serve(sockets=[self._socket]))
        while not self.server.started:
            if serve_task.done():
                self.state = ServerState.STOPPED
                serve_task.result()
                raise ServerError("server exited before accepting connections")
            await asyncio.sleep(TICK_SEC)

        self.state = ServerState.RUNNING
        self.logger.info(
            "server_running",
            address=self.settings.address,
            port=self.port,
            read_timeout_sec=self.settings.read_timeout,
            write_timeout_sec=self.settings.write_timeout,
            idle_timeout_sec=self.settings.idle_timeout,
        )

        while not self._shutdown_requested and not serve_task.done():
            await asyncio.sleep(TICK_SEC)
        if serve_task.done():
            self.state = ServerState.STOPPED
            serve_task.result()
            self.logger.info("server_stopped")
            return

        self.state = ServerState.SHUTTING_DOWN
        self.logger.info(
            "server_shutting_down",
            signal=signal.Signals(self._shutdown_signal).name if self._shutdown_signal else None,
            timeout_sec=self.settings.shutdown_timeout,
        )
        self.server.should_exit = True
        await self._drain(serve_task)

    async def _drain(self, serve_task: asyncio.Task) -> None:
        try:
            await asyncio.wait_for(asyncio.shield(serve_task), timeout=self.settings.shutdown_timeout)
        except asyncio.TimeoutError:
            # Stops uvicorn waiting on open connections; remaining request tasks are abandoned
            self.server.force_exit = True
            await serve_task
            self.state = ServerState.STOPPED
            raise ShutdownTimeoutError(
                f"in-flight requests did not finish within {self.settings.shutdown_timeout}s"
            ) from None
        self.state = ServerState.STOPPED
        self.logger.info("server_stopped")


def run_server(
    settings: Settings | None = None,
    app: Any = None,
    logger: Any = None,
) -> int:
    """
    Run the API server until shutdown. Returns the process exit code.

    0 on a clean graceful stop; 1 on bind failure or forced shutdown.
    """
    from backend_api.api_server.server import create_app

    settings = settings or get_settings()
    configure_structlog(level=settings.log_level)
    logger = logger or get_logger("http")
    app = app or create_app(settings, logger)
    lifecycle = ServerLifecycle(app, settings, logger)

    try:
        asyncio.run(lifecycle.run())
    except BindError as e:
        logger.error("server_failed_to_start", address=settings.address, error=str(e))
        return 1
    except ShutdownTimeoutError as e:
        logger.error("server_forced_shutdown", error=str(e), timeout_sec=settings.shutdown_timeout)
        return 1
    except ServerError as e:
        logger.error("server_failed", error=str(e))
        return 1
    return 0
