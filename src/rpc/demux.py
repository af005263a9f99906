"""Frame reader: the single consumer of the backend's stdout."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from src.config.logging import LOG_LINE_PREVIEW_CHARS
from src.config.backend import DEFAULT_BACKEND_READ_CHUNK_BYTES

from .frames import FrameBuffer, parse_frame
from .registry import CorrelationRegistry

logger = logging.getLogger(__name__)


def _preview(line: bytes) -> str:
    text = line.decode("utf-8", errors="replace")
    if len(text) > LOG_LINE_PREVIEW_CHARS:
        return text[:LOG_LINE_PREVIEW_CHARS] + "..."
    return text


class FrameReader:
    """Reassemble newline-delimited responses and hand each to the registry.

    Malformed lines are logged and skipped; the rest of the buffer is still
    processed. Responses nobody waits for are counted and dropped.
    """

    def __init__(
        self,
        stream: asyncio.StreamReader,
        registry: CorrelationRegistry,
        *,
        chunk_bytes: int = DEFAULT_BACKEND_READ_CHUNK_BYTES,
    ) -> None:
        self._stream = stream
        self._registry = registry
        self._chunk_bytes = max(1, int(chunk_bytes))
        self._buffer = FrameBuffer()
        self._task: asyncio.Task | None = None
        self.malformed_frames = 0
        self.delivered_frames = 0
        self.eof = asyncio.Event()

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def feed(self, chunk: bytes) -> int:
        """Process one chunk of transport bytes; returns how many frames were delivered."""
        delivered = 0
        for line in self._buffer.feed(chunk):
            if await self.dispatch_line(line):
                delivered += 1
        return delivered

    async def dispatch_line(self, line: bytes) -> bool:
        try:
            frame = parse_frame(line)
        except ValueError as exc:
            self.malformed_frames += 1
            logger.warning("malformed backend frame dropped: %s line=%s", exc, _preview(line))
            return False

        if await self._registry.resolve(frame):
            self.delivered_frames += 1
            return True
        logger.debug("no waiter for backend response id=%r; discarded", frame.id)
        return False

    async def run(self) -> None:
        try:
            while True:
                chunk = await self._stream.read(self._chunk_bytes)
                if not chunk:
                    break
                await self.feed(chunk)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("frame reader stopped on unexpected error")
        finally:
            self.eof.set()

        trailing = self._buffer.clear()
        if trailing:
            logger.warning("backend stdout closed with %d bytes of incomplete frame", trailing)
        logger.error(
            "backend stdout closed; %d requests still pending will not resolve",
            self._registry.pending_count(),
        )


__all__ = ["FrameReader"]
