"""Backend process launcher (stdio JSON-RPC server)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from collections.abc import Mapping, Sequence

from src.config.backend import BACKEND_STDERR_LOG_PREFIX

logger = logging.getLogger(__name__)


class BackendProcess:
    """Own the lifetime of the external process behind the bridge.

    Exposes its stdin/stdout as asyncio streams for the writer and frame
    reader. Stderr is forwarded line by line to the log so crashes and bad
    credentials show up immediately.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        shutdown_timeout_s: float = 5.0,
    ) -> None:
        if not command:
            raise ValueError("backend command must not be empty")
        self._command = tuple(command)
        self._env = dict(env) if env is not None else None
        self._shutdown_timeout_s = float(shutdown_timeout_s)
        self._proc: asyncio.subprocess.Process | None = None
        self._stderr_task: asyncio.Task | None = None

    @property
    def stdin(self) -> asyncio.StreamWriter:
        if self._proc is None or self._proc.stdin is None:
            raise RuntimeError("backend process is not running")
        return self._proc.stdin

    @property
    def stdout(self) -> asyncio.StreamReader:
        if self._proc is None or self._proc.stdout is None:
            raise RuntimeError("backend process is not running")
        return self._proc.stdout

    @property
    def pid(self) -> int | None:
        return None if self._proc is None else self._proc.pid

    @property
    def returncode(self) -> int | None:
        return None if self._proc is None else self._proc.returncode

    async def start(self) -> None:
        if self._proc is not None:
            return
        self._proc = await asyncio.create_subprocess_exec(
            *self._command,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self._env,
        )
        self._stderr_task = asyncio.create_task(self._pump_stderr())
        logger.info("backend started pid=%s cmd=%s", self._proc.pid, self._command[0])

    async def _pump_stderr(self) -> None:
        proc = self._proc
        if proc is None or proc.stderr is None:
            return
        try:
            while True:
                line = await proc.stderr.readline()
                if not line:
                    break
                text = line.decode("utf-8", errors="replace").rstrip()
                if text:
                    logger.warning("%s %s", BACKEND_STDERR_LOG_PREFIX, text)
        except asyncio.CancelledError:
            return
        except Exception:
            logger.debug("stderr pump exiting due to unexpected error", exc_info=True)

    async def stop(self) -> None:
        proc = self._proc
        if proc is None:
            return
        if proc.stdin is not None and not proc.stdin.is_closing():
            proc.stdin.close()
        if proc.returncode is None:
            try:
                await asyncio.wait_for(proc.wait(), timeout=self._shutdown_timeout_s)
            except TimeoutError:
                with contextlib.suppress(ProcessLookupError):
                    proc.terminate()
                try:
                    await asyncio.wait_for(proc.wait(), timeout=self._shutdown_timeout_s)
                except TimeoutError:
                    logger.warning("backend pid=%s ignored SIGTERM; killing", proc.pid)
                    with contextlib.suppress(ProcessLookupError):
                        proc.kill()
                    await proc.wait()
        if self._stderr_task is not None:
            # Let the pump drain what the process wrote before exiting.
            with contextlib.suppress(TimeoutError, asyncio.CancelledError):
                await asyncio.wait_for(self._stderr_task, timeout=self._shutdown_timeout_s)
            self._stderr_task = None
        logger.info("backend exited pid=%s code=%s", proc.pid, proc.returncode)
        self._proc = None


__all__ = ["BackendProcess"]
