"""Runtime package.

Keep this module dependency-light: importing `src.runtime.*` in unit tests
should not spawn the backend or require docker.
"""

__all__: list[str] = []
