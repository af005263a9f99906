"""Serialized line writer for the shared backend stdin."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import orjson

from src.errors import TransportClosedError

logger = logging.getLogger(__name__)


class LineTransport(Protocol):
    """The subset of ``asyncio.StreamWriter`` the writer relies on."""

    def write(self, data: bytes) -> None: ...

    async def drain(self) -> None: ...

    def is_closing(self) -> bool: ...


def encode_line(message: dict[str, Any]) -> bytes:
    return orjson.dumps(message) + b"\n"


class StreamWriter:
    def __init__(self, transport: LineTransport) -> None:
        self._transport = transport
        self._lock = asyncio.Lock()
        self.lines_sent = 0

    async def send(self, message: dict[str, Any]) -> None:
        """Write ``message`` as one JSON line. Does not wait for any reply."""
        line = encode_line(message)
        async with self._lock:
            if self._transport.is_closing():
                raise TransportClosedError("backend stdin is closed")
            try:
                self._transport.write(line)
                await self._transport.drain()
            except (ConnectionError, RuntimeError) as exc:
                logger.warning("backend write failed: %s", exc)
                raise TransportClosedError(str(exc) or type(exc).__name__) from exc
            self.lines_sent += 1


__all__ = ["LineTransport", "StreamWriter", "encode_line"]
