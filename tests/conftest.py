from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
ECHO_BACKEND = REPO_ROOT / "tests" / "fixtures" / "echo_backend.py"


def pytest_configure() -> None:
    # Keep `import src...` and `import tests...` working when running `pytest` from the repo root.
    repo_root_str = str(REPO_ROOT)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


@pytest.fixture()
def echo_backend_command() -> tuple[str, ...]:
    """Command line for the stdio fixture backend, run with the current interpreter."""
    return (sys.executable, "-u", str(ECHO_BACKEND))
