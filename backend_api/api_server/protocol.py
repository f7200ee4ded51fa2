"""
HTTP/1.1 connection protocol with per-request read and write deadlines.

uvicorn only bounds the idle gap between keep-alive requests. This h11-based
protocol adds two more timers per connection:

- read: from the first byte of a request (or accept, for the first one) until
  the request, body included, has been fully received.
- write: from the moment the request head is parsed until the response has
  been fully written.

When either deadline passes the connection is closed. A handler still running
sees http.disconnect on receive and its later sends are dropped.
"""

from __future__ import annotations

import asyncio
from typing import Any

import h11
from uvicorn.protocols.http.h11_impl import H11Protocol

from backend_api.api_logging import get_logger


class DeadlineH11Protocol(H11Protocol):
    """H11Protocol that closes connections exceeding the read or write timeout."""

    def __init__(
        self,
        *args: Any,
        read_timeout: float,
        write_timeout: float,
        logger: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout
        self.deadline_logger = logger or get_logger("http")
        self._read_timer: asyncio.TimerHandle | None = None
        self._write_timer: asyncio.TimerHandle | None = None

    def connection_made(self, transport: asyncio.Transport) -> None:  # type: ignore[override]
        super().connection_made(transport)
        self._arm_read_timer()

    def connection_lost(self, exc: Exception | None) -> None:
        self._cancel_read_timer()
        self._cancel_write_timer()
        super().connection_lost(exc)

    def data_received(self, data: bytes) -> None:
        if self._read_timer is None and self.conn.their_state is not h11.DONE:
            self._arm_read_timer()
        super().data_received(data)

    def handle_events(self) -> None:
        previous_cycle = self.cycle
        super().handle_events()
        if self.cycle is not previous_cycle and self._write_timer is None:
            self._write_timer = self.loop.call_later(self.write_timeout, self._on_write_timeout)
        if self.conn.their_state is h11.DONE:
            self._cancel_read_timer()

    def on_response_complete(self) -> None:
        self._cancel_write_timer()
        super().on_response_complete()

    def _arm_read_timer(self) -> None:
        self._cancel_read_timer()
        self._read_timer = self.loop.call_later(self.read_timeout, self._on_read_timeout)

    def _cancel_read_timer(self) -> None:
        if self._read_timer is not None:
            self._read_timer.cancel()
            self._read_timer = None

    def _cancel_write_timer(self) -> None:
        if self._write_timer is not None:
            self._write_timer.cancel()
            self._write_timer = None

    def _on_read_timeout(self) -> None:
        self._read_timer = None
        self._expire("read_timeout", self.read_timeout)

    def _on_write_timeout(self) -> None:
        self._write_timer = None
        self._expire(
            "write_timeout",
            self.write_timeout,
            method=self.scope["method"],
            path=self.scope["path"],
        )

    def _expire(self, event: str, timeout: float, **fields: Any) -> None:
        if self.transport is None or self.transport.is_closing():
            return
        self.deadline_logger.warning(
            event,
            client="%s:%d" % self.client if self.client else None,
            timeout_sec=timeout,
            **fields,
        )
        self.transport.close()
