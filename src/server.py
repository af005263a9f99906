"""Main FastAPI server: HTTP facade over a stdio JSON-RPC (MCP) backend."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse, Response

from src.state import RuntimeDeps
from src.runtime.logging import configure_logging
from src.runtime.settings import load_settings
from src.runtime.dependencies import build_runtime_deps
from src.config.jsonrpc import METHOD_TOOLS_CALL, METHOD_TOOLS_LIST
from src.handlers.http import call_backend, handle_stream_request
from src.handlers.http.errors import error_response
from src.handlers.http.parser import parse_rpc_body, parse_execute_body

logger = logging.getLogger(__name__)

DepsFactory = Callable[[], Awaitable[RuntimeDeps]]


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(build_deps: DepsFactory = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = await build_deps()
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    def _status() -> dict[str, object]:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is None:
            return {"status": "starting"}
        registry = deps.bridge.registry
        return {
            "status": "ok",
            "pending": registry.pending_count(),
            "streams": registry.session_count(),
            "stream_slots": {
                "active": deps.streams.active_count(),
                "capacity": deps.streams.capacity,
                "rejected": deps.streams.rejected,
                "sessions": deps.streams.active_session_ids(),
            },
            "last_request_id": deps.bridge.last_request_id,
            "delivered_frames": deps.reader.delivered_frames,
            "orphaned_frames": registry.orphaned_frames,
            "malformed_frames": deps.reader.malformed_frames,
            "backend_eof": deps.reader.eof.is_set(),
            "backend_pid": deps.process.pid,
            "backend_returncode": deps.process.returncode,
        }

    @app.get("/")
    async def root() -> dict[str, object]:
        return _status()

    @app.get("/health")
    async def health() -> dict[str, object]:
        return _status()

    @app.get("/healthz")
    async def healthz() -> dict[str, object]:
        return _status()

    @app.get("/tools")
    async def list_tools() -> Response:
        return await call_backend(_runtime_deps(app), METHOD_TOOLS_LIST, {})

    @app.post("/execute")
    async def execute(request: Request) -> Response:
        try:
            tool, args = parse_execute_body(await request.body())
        except ValueError as exc:
            return error_response(400, str(exc))
        logger.info("execute tool=%s", tool)
        return await call_backend(_runtime_deps(app), METHOD_TOOLS_CALL, {"name": tool, "arguments": args})

    @app.post("/rpc")
    async def rpc(request: Request) -> Response:
        try:
            method, params = parse_rpc_body(await request.body())
        except ValueError as exc:
            return error_response(400, str(exc))
        return await call_backend(_runtime_deps(app), method, params)

    @app.post("/stream")
    async def stream(request: Request) -> Response:
        return await handle_stream_request(request, _runtime_deps(app))

    return app


configure_logging()

app = create_app()


def main() -> None:
    settings = load_settings()
    uvicorn.run(app, host=settings.http.host, port=settings.http.port, log_config=None)


__all__ = ["app", "create_app", "main"]
