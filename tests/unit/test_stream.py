from __future__ import annotations

import asyncio
from types import SimpleNamespace

import orjson
import pytest

from src.rpc.bridge import RpcBridge
from src.rpc.demux import FrameReader
from src.rpc.writer import StreamWriter
from src.rpc.registry import CorrelationRegistry
from src.handlers.streams import StreamAdmission
from src.handlers.http.stream import format_sse_event, handle_stream_request, stream_session_events

from tests.unit.fakes import FakeTransport, response_line


class _FakeRequest:
    def __init__(self, body: bytes = b"") -> None:
        self.disconnected = False
        self._body = body

    async def body(self) -> bytes:
        return self._body

    async def is_disconnected(self) -> bool:
        return self.disconnected


def _make_deps() -> tuple[SimpleNamespace, FrameReader]:
    registry = CorrelationRegistry()
    deps = SimpleNamespace(
        bridge=RpcBridge(StreamWriter(FakeTransport()), registry),
        streams=StreamAdmission(max_streams=2),
    )
    return deps, FrameReader(asyncio.StreamReader(), registry)


def _parse_events(chunks: list[bytes]) -> list[dict]:
    out = []
    for chunk in chunks:
        assert chunk.startswith(b"data: ") and chunk.endswith(b"\n\n")
        out.append(orjson.loads(chunk[len(b"data: ") : -2]))
    return out


def test_format_sse_event() -> None:
    assert format_sse_event({"id": 1, "result": "x"}) == b'data: {"id":1,"result":"x"}\n\n'


@pytest.mark.asyncio
async def test_stream_yields_each_response_then_ends() -> None:
    deps, reader = _make_deps()
    request = _FakeRequest()
    slot = await deps.streams.reserve()
    session = await deps.bridge.open_stream([{"jsonrpc": "2.0", "id": i, "method": "m", "params": {}} for i in (1, 2)])

    async def _collect() -> list[bytes]:
        return [chunk async for chunk in stream_session_events(request, session, deps, slot, poll_s=0.01)]

    collector = asyncio.create_task(_collect())
    await reader.feed(response_line(2, result="b"))
    await reader.feed(response_line(1, result="a"))
    chunks = await asyncio.wait_for(collector, timeout=1.0)

    assert [e["id"] for e in _parse_events(chunks)] == [2, 1]
    assert deps.streams.active_count() == 0


@pytest.mark.asyncio
async def test_client_disconnect_cancels_outstanding_ids() -> None:
    deps, reader = _make_deps()
    request = _FakeRequest()
    slot = await deps.streams.reserve()
    session = await deps.bridge.open_stream(
        [{"jsonrpc": "2.0", "id": i, "method": "m", "params": {}} for i in (1, 2, 3)]
    )
    await reader.feed(response_line(1, result="a"))

    gen = stream_session_events(request, session, deps, slot, poll_s=0.01)
    first = await gen.__anext__()
    assert _parse_events([first])[0]["id"] == 1

    request.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(gen.__anext__(), timeout=1.0)

    registry = deps.bridge.registry
    assert registry.pending_count() == 0
    assert registry.session_count() == 0
    assert deps.streams.active_count() == 0
    # Late frames for the two cancelled ids go nowhere.
    assert await reader.feed(response_line(2, result="b") + response_line(3, result="c")) == 0
    assert registry.orphaned_frames == 2


@pytest.mark.asyncio
async def test_closing_generator_early_cancels_session() -> None:
    deps, _reader = _make_deps()
    request = _FakeRequest()
    slot = await deps.streams.reserve()
    session = await deps.bridge.open_stream([{"jsonrpc": "2.0", "id": 7, "method": "m", "params": {}}])

    gen = stream_session_events(request, session, deps, slot, poll_s=10.0)
    task = asyncio.create_task(gen.__anext__())
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await gen.aclose()

    assert session.closed
    assert deps.bridge.registry.pending_count() == 0
    assert deps.streams.active_count() == 0


@pytest.mark.asyncio
async def test_stream_request_at_capacity_is_503_until_a_slot_frees() -> None:
    deps, reader = _make_deps()
    deps.settings = SimpleNamespace(
        limits=SimpleNamespace(max_batch_size=8),
        http=SimpleNamespace(stream_disconnect_poll_s=0.01),
    )
    held = [await deps.streams.reserve(), await deps.streams.reserve()]
    request = _FakeRequest(orjson.dumps([{"jsonrpc": "2.0", "id": 1, "method": "m", "params": {}}]))

    resp = await handle_stream_request(request, deps)

    assert resp.status_code == 503
    assert deps.streams.rejected == 1
    assert deps.bridge.registry.pending_count() == 0
    assert deps.bridge.registry.session_count() == 0

    await deps.streams.release(held[0])
    resp = await handle_stream_request(request, deps)
    assert resp.status_code == 200
    assert deps.streams.active_count() == 2
    assert deps.bridge.registry.contains(1)
    await reader.feed(response_line(1, result="a"))
    chunks = [chunk async for chunk in resp.body_iterator]
    assert [e["id"] for e in _parse_events(chunks)] == [1]
    assert deps.streams.active_count() == 1
    assert held[1] is not None
