"""
Response interceptor: observe the status code a handler writes.

Wraps the ASGI ``send`` callable and forwards every message unchanged.
"""

from __future__ import annotations

from starlette.types import Message, Send

DEFAULT_STATUS = 200


class StatusRecorder:
    """
    ASGI send wrapper that records the first response status written.

    status_code stays at DEFAULT_STATUS until an ``http.response.start``
    message passes through; later start messages do not overwrite it.
    """

    def __init__(self, send: Send, default_status: int = DEFAULT_STATUS) -> None:
        self._send = send
        self.status_code = default_status
        self.started = False

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start" and not self.started:
            self.started = True
            self.status_code = int(message["status"])
        await self._send(message)
