"""Caller-facing entry points: single requests and streamed batches."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import Sequence

from src.config.jsonrpc import (
    KEY_ID,
    KEY_METHOD,
    KEY_PARAMS,
    KEY_JSONRPC,
    JSONRPC_VERSION,
)
from src.errors import InvalidBatchError, TransportClosedError

from .ids import IdAllocator
from .writer import StreamWriter
from .session import FanoutSession
from .registry import CorrelationRegistry
from .admission import validate_batch, build_error_frame

logger = logging.getLogger(__name__)


def build_request(request_id: int, method: str, params: Any) -> dict[str, Any]:
    return {
        KEY_JSONRPC: JSONRPC_VERSION,
        KEY_ID: request_id,
        KEY_METHOD: method,
        KEY_PARAMS: params,
    }


class RpcBridge:
    def __init__(
        self,
        writer: StreamWriter,
        registry: CorrelationRegistry,
        *,
        ids: IdAllocator | None = None,
    ) -> None:
        self._writer = writer
        self._registry = registry
        self._ids = ids or IdAllocator()

    @property
    def registry(self) -> CorrelationRegistry:
        return self._registry

    @property
    def last_request_id(self) -> int:
        """Most recent id drawn for a single-response request (0 before any)."""
        return self._ids.last_issued

    async def _register_single(self, future: asyncio.Future[Any]) -> int:
        while True:
            request_id = self._ids.next()
            if await self._registry.register_single(request_id, future):
                return request_id
            logger.debug("id %d held by a stream; drawing the next one", request_id)

    async def call(self, method: str, params: Any = None) -> Any:
        """Send one request and wait for its response.

        Returns the ``result`` payload verbatim. Raises ``RpcError`` when the
        backend answered with an error and ``TransportClosedError`` when the
        request could not be written.
        """
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        request_id = await self._register_single(future)
        try:
            await self._writer.send(build_request(request_id, method, {} if params is None else params))
            return await future
        except (asyncio.CancelledError, TransportClosedError):
            await asyncio.shield(self._registry.cancel(request_id, future=future))
            raise

    async def open_stream(self, requests: Sequence[Any]) -> FanoutSession:
        """Admit a batch and forward it; the returned session yields one event per response.

        A rejected batch yields a session holding only the error frame. Nothing
        from a rejected batch reaches the backend.
        """
        try:
            session = FanoutSession(validate_batch(requests))
            await self._registry.register_session(session)
        except InvalidBatchError as exc:
            logger.info("stream rejected: %s (id=%r)", exc.message, exc.request_id)
            return FanoutSession.rejected(build_error_frame(exc))

        if not session.remaining:
            session.close()
            return session

        try:
            for request in session.requests:
                await self._writer.send(request)
        except BaseException:
            await asyncio.shield(self.cancel_stream(session))
            raise
        logger.debug("stream %s forwarded %d requests", session.session_id, len(session.requests))
        return session

    async def cancel_stream(self, session: FanoutSession) -> set[int]:
        removed = await self._registry.cancel_session(session)
        if removed:
            logger.info(
                "stream %s cancelled with %d outstanding ids: %s",
                session.session_id,
                len(removed),
                sorted(removed),
            )
        return removed


__all__ = ["RpcBridge", "build_request"]
