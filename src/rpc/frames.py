"""Newline-delimited frame reassembly and response parsing."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson

from src.config.jsonrpc import KEY_ID, KEY_ERROR, KEY_RESULT


@dataclass(frozen=True, slots=True)
class ResponseFrame:
    id: Any
    result: Any
    error: Any
    raw: dict[str, Any]

    @property
    def is_error(self) -> bool:
        return self.error is not None


class FrameBuffer:
    """Accumulate raw transport bytes and split them into complete lines.

    Works on bytes so a multi-byte UTF-8 sequence split across two reads is only
    decoded once the whole line is present.
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    def feed(self, chunk: bytes) -> list[bytes]:
        self._buf.extend(chunk)
        lines: list[bytes] = []
        while True:
            idx = self._buf.find(b"\n")
            if idx < 0:
                break
            line = bytes(self._buf[:idx]).strip()
            del self._buf[: idx + 1]
            if line:
                lines.append(line)
        return lines

    @property
    def pending_bytes(self) -> int:
        return len(self._buf)

    def clear(self) -> int:
        n = len(self._buf)
        self._buf.clear()
        return n


def parse_frame(line: bytes) -> ResponseFrame:
    try:
        msg = orjson.loads(line)
    except orjson.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("frame must be a JSON object")

    return ResponseFrame(
        id=msg.get(KEY_ID),
        result=msg.get(KEY_RESULT),
        error=msg.get(KEY_ERROR),
        raw=msg,
    )


def is_numeric_id(value: Any) -> bool:
    # bool is an int subclass but never a valid correlation id.
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = ["FrameBuffer", "ResponseFrame", "is_numeric_id", "parse_frame"]
