"""Fan-out route: one SSE stream carrying every response of a batch."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import AsyncIterator

import orjson
from fastapi import Request
from fastapi.responses import Response, StreamingResponse

from src.state import RuntimeDeps
from src.rpc.session import FanoutSession
from src.errors import TransportClosedError
from src.handlers.streams import StreamSlot
from src.config.http import (
    SSE_HEADERS,
    SSE_MEDIA_TYPE,
    HTTP_ERROR_AT_CAPACITY,
    HTTP_ERROR_BATCH_TOO_LARGE,
    HTTP_ERROR_BACKEND_UNAVAILABLE,
)

from .errors import error_response
from .parser import parse_stream_body

logger = logging.getLogger(__name__)


def format_sse_event(event: dict[str, Any]) -> bytes:
    return b"data: " + orjson.dumps(event) + b"\n\n"


async def _release_stream(session: FanoutSession, slot: StreamSlot, runtime_deps: RuntimeDeps) -> None:
    if not session.closed:
        await runtime_deps.bridge.cancel_stream(session)
    await runtime_deps.streams.release(slot)


async def stream_session_events(
    request: Request,
    session: FanoutSession,
    runtime_deps: RuntimeDeps,
    slot: StreamSlot,
    *,
    poll_s: float,
) -> AsyncIterator[bytes]:
    """Yield one SSE event per resolved id until the session closes.

    While idle, checks for a client disconnect every ``poll_s`` seconds. On any
    exit before completion the session's outstanding ids are cancelled. The
    admission slot is released on every exit.
    """
    try:
        while True:
            try:
                event = await asyncio.wait_for(session.next_event(), timeout=poll_s)
            except TimeoutError:
                if await request.is_disconnected():
                    logger.info("stream %s client disconnected", session.session_id)
                    return
                continue
            if event is None:
                return
            yield format_sse_event(event)
    finally:
        # One shielded step: a cancelled scope re-raises at every await.
        await asyncio.shield(_release_stream(session, slot, runtime_deps))


async def handle_stream_request(request: Request, runtime_deps: RuntimeDeps) -> Response:
    try:
        requests = parse_stream_body(await request.body())
    except ValueError as exc:
        return error_response(400, str(exc))

    if len(requests) > runtime_deps.settings.limits.max_batch_size:
        return error_response(413, HTTP_ERROR_BATCH_TOO_LARGE)

    slot = await runtime_deps.streams.reserve()
    if slot is None:
        return error_response(503, HTTP_ERROR_AT_CAPACITY)

    try:
        session = await runtime_deps.bridge.open_stream(requests)
    except TransportClosedError as exc:
        await runtime_deps.streams.release(slot)
        logger.error("stream forward failed: %s", exc.reason)
        return error_response(502, HTTP_ERROR_BACKEND_UNAVAILABLE)
    except BaseException:
        await asyncio.shield(runtime_deps.streams.release(slot))
        raise

    runtime_deps.streams.bind(slot, session)
    logger.info(
        "stream %s opened ids=%s. Active: %s",
        session.session_id,
        list(session.ids),
        runtime_deps.streams.active_count(),
    )
    body = stream_session_events(
        request,
        session,
        runtime_deps,
        slot,
        poll_s=runtime_deps.settings.http.stream_disconnect_poll_s,
    )
    return StreamingResponse(body, media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)


__all__ = ["format_sse_event", "handle_stream_request", "stream_session_events"]
