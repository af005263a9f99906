from __future__ import annotations

import json

import pytest

from src.handlers.http.parser import parse_rpc_body, parse_stream_body, parse_execute_body


def test_parse_execute_body_ok() -> None:
    tool, args = parse_execute_body(json.dumps({"tool": "get_me", "args": {"a": 1}}).encode())
    assert tool == "get_me"
    assert args == {"a": 1}


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"[]",
        json.dumps({"args": {}}).encode(),
        json.dumps({"tool": 1, "args": {}}).encode(),
        json.dumps({"tool": "x"}).encode(),
        json.dumps({"tool": "x", "args": [1]}).encode(),
    ],
)
def test_parse_execute_body_invalid(raw: bytes) -> None:
    with pytest.raises(ValueError) as exc:
        parse_execute_body(raw)
    assert str(exc.value) == "Body must have { tool: string, args: object }"


def test_parse_rpc_body_defaults_params() -> None:
    assert parse_rpc_body(b'{"method": " ping "}') == ("ping", {})
    assert parse_rpc_body(b'{"method": "m", "params": null}') == ("m", {})
    assert parse_rpc_body(b'{"method": "m", "params": [1, 2]}') == ("m", [1, 2])


@pytest.mark.parametrize("raw", [b"{", b'{"method": ""}', b'{"params": {}}', b'{"method": "m", "params": 3}'])
def test_parse_rpc_body_invalid(raw: bytes) -> None:
    with pytest.raises(ValueError):
        parse_rpc_body(raw)


def test_parse_stream_body_accepts_object_or_list() -> None:
    one = {"jsonrpc": "2.0", "id": 1, "method": "m", "params": {}}
    assert parse_stream_body(json.dumps(one).encode()) == [one]
    assert parse_stream_body(json.dumps([one, {"id": "x"}]).encode()) == [one, {"id": "x"}]


@pytest.mark.parametrize("raw", [b"nope", b"[]", b"3", b'"s"'])
def test_parse_stream_body_invalid(raw: bytes) -> None:
    with pytest.raises(ValueError):
        parse_stream_body(raw)
