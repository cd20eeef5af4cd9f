"""Error hierarchy for mdsel CLI failures.

The executor never raises these past its boundary; they name the failure
and carry the diagnostic text that ends up in ``ExecutionResult.stderr``.
"""

from __future__ import annotations


class MdselError(Exception):
    """Base error for all mdsel invocation failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class MdselNotFoundError(MdselError):
    def __init__(self, path: str, *, cause: Exception | None = None):
        super().__init__(
            f"mdsel CLI not found at {path}. Install with: npm install -g mdsel",
            cause=cause,
        )
        self.path = path


class MdselPermissionError(MdselError):
    def __init__(self, path: str, *, cause: Exception | None = None):
        super().__init__(f"Permission denied executing mdsel CLI at {path}", cause=cause)
        self.path = path


class MdselTimeoutError(MdselError):
    def __init__(self, timeout_ms: int):
        super().__init__(f"mdsel command timed out after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


def spawn_error(path: str, exc: Exception) -> MdselError:
    """Classify an error raised while starting the CLI."""
    if isinstance(exc, FileNotFoundError):
        return MdselNotFoundError(path, cause=exc)
    if isinstance(exc, PermissionError):
        return MdselPermissionError(path, cause=exc)
    return MdselError(str(exc), cause=exc)
