"""Shared fixtures: fake mdsel binaries and a recording executor."""

import pytest

from mdsel_claude.executor import MdselCommand
from mdsel_claude.types import ExecutionResult


class RecordingExecutor:
    """Executor double that records calls instead of spawning processes."""

    def __init__(self, result: ExecutionResult | None = None):
        self.result = result or ExecutionResult(stdout="ok\n")
        self.calls: list[tuple[str, list[str]]] = []

    async def execute(self, command, args):
        self.calls.append((MdselCommand(command).value, list(args)))
        return self.result


@pytest.fixture
def make_mdsel(tmp_path):
    """Write an executable shell script standing in for the mdsel CLI."""

    def make(body: str, name: str = "mdsel") -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n", encoding="utf-8")
        path.chmod(0o755)
        return str(path)

    return make


@pytest.fixture
def echo_mdsel(make_mdsel):
    """Fake mdsel that prints each argument it received on its own line."""
    return make_mdsel(r'''for arg in "$@"; do printf '%s\n' "$arg"; done''')


@pytest.fixture
def recording_executor():
    def make(result: ExecutionResult | None = None) -> RecordingExecutor:
        return RecordingExecutor(result)

    return make
