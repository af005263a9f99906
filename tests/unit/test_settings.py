from __future__ import annotations

import os
from pathlib import Path

import pytest

from src.runtime.settings import load_settings, build_docker_command


def _clear(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "BACKEND_COMMAND",
        "GITHUB_PERSONAL_ACCESS_TOKEN",
        "GITHUB_TOOLSETS",
        "MCP_DOCKER_IMAGE",
        "PORT",
        "MAX_CONCURRENT_STREAMS",
        "MAX_BATCH_SIZE",
        "BACKEND_READ_CHUNK_BYTES",
        "STREAM_DISCONNECT_POLL_S",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_PATH", os.devnull)


def test_default_command_runs_github_mcp_server_image(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "tok")

    settings = load_settings()
    assert settings.backend.command == build_docker_command(
        token="tok",
        image="ghcr.io/github/github-mcp-server",
        toolsets="repos,issues",
    )
    assert settings.backend.command[:4] == ("docker", "run", "-i", "--rm")
    assert "GITHUB_PERSONAL_ACCESS_TOKEN=tok" in settings.backend.command
    assert settings.http.port == 6277


def test_missing_token_is_a_startup_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    with pytest.raises(ValueError, match="GITHUB_PERSONAL_ACCESS_TOKEN"):
        load_settings()


def test_backend_command_override_skips_token(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("BACKEND_COMMAND", "python3 -u 'my server.py' --stdio")

    settings = load_settings()
    assert settings.backend.command == ("python3", "-u", "my server.py", "--stdio")


def test_invalid_numbers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("BACKEND_COMMAND", "cat")
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("MAX_CONCURRENT_STREAMS", "0")
    monkeypatch.setenv("BACKEND_READ_CHUNK_BYTES", "-5")
    monkeypatch.setenv("STREAM_DISCONNECT_POLL_S", "abc")
    monkeypatch.setenv("MAX_BATCH_SIZE", "8")

    settings = load_settings()
    assert settings.http.port == 6277
    assert settings.limits.max_concurrent_streams == 1
    assert settings.limits.max_batch_size == 8
    assert settings.backend.read_chunk_bytes == 64 * 1024
    assert settings.http.stream_disconnect_poll_s == 1.0


def test_env_file_supplies_missing_token(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear(monkeypatch)
    # Registers the var with monkeypatch so teardown removes what the file sets.
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "")
    monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN")
    env_file = tmp_path / ".env"
    env_file.write_text("GITHUB_PERSONAL_ACCESS_TOKEN=from-file\n")
    monkeypatch.setenv("DOTENV_PATH", str(env_file))

    settings = load_settings()
    assert "GITHUB_PERSONAL_ACCESS_TOKEN=from-file" in settings.backend.command


def test_env_file_does_not_override_process_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "from-env")
    env_file = tmp_path / ".env"
    env_file.write_text("GITHUB_PERSONAL_ACCESS_TOKEN=from-file\nGITHUB_TOOLSETS=repos\n")
    monkeypatch.setenv("GITHUB_TOOLSETS", "")
    monkeypatch.delenv("GITHUB_TOOLSETS")
    monkeypatch.setenv("DOTENV_PATH", str(env_file))

    settings = load_settings()
    assert "GITHUB_PERSONAL_ACCESS_TOKEN=from-env" in settings.backend.command
    assert "GITHUB_TOOLSETS=repos" in settings.backend.command


def test_default_env_file_is_read_from_working_directory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _clear(monkeypatch)
    monkeypatch.delenv("DOTENV_PATH")
    monkeypatch.setenv("GITHUB_PERSONAL_ACCESS_TOKEN", "")
    monkeypatch.delenv("GITHUB_PERSONAL_ACCESS_TOKEN")
    (tmp_path / ".env").write_text("GITHUB_PERSONAL_ACCESS_TOKEN=cwd-file\n")
    monkeypatch.chdir(tmp_path)

    settings = load_settings()
    assert "GITHUB_PERSONAL_ACCESS_TOKEN=cwd-file" in settings.backend.command
