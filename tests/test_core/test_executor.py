"""Tests for the mdsel subprocess executor."""

import asyncio
import os
from pathlib import Path

import pytest

from mdsel_claude.config import Config
from mdsel_claude.executor import Executor, MdselCommand, MdselExecutor, execute
from mdsel_claude.types import ExecutionResult


class TestMdselExecutor:
    def test_implements_protocol(self, echo_mdsel):
        assert isinstance(MdselExecutor(binary=echo_mdsel), Executor)

    async def test_argument_vector_for_select(self, echo_mdsel):
        executor = MdselExecutor(binary=echo_mdsel)
        result = await executor.execute("select", ["h2.0", "README.md"])
        assert result.success
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["select", "h2.0", "README.md"]

    async def test_argument_vector_for_index(self, echo_mdsel):
        executor = MdselExecutor(binary=echo_mdsel)
        result = await executor.execute(MdselCommand.INDEX, ["a.md", "b.md"])
        assert result.stdout.splitlines() == ["index", "a.md", "b.md"]

    async def test_arguments_are_not_shell_interpreted(self, echo_mdsel):
        executor = MdselExecutor(binary=echo_mdsel)
        args = ["$(echo pwned)", "two words.md", "; rm -rf /", "*"]
        result = await executor.execute("index", args)
        assert result.stdout.splitlines() == ["index", *args]

    async def test_nonzero_exit(self, make_mdsel):
        binary = make_mdsel('echo "selector not found" >&2; exit 3')
        result = await MdselExecutor(binary=binary).execute("select", ["h9.9", "x.md"])
        assert not result.success
        assert result.exit_code == 3
        assert result.stderr == "selector not found\n"
        assert not result.timed_out

    async def test_captures_both_streams(self, make_mdsel):
        binary = make_mdsel('echo out; echo err >&2')
        result = await MdselExecutor(binary=binary).execute("index", ["x.md"])
        assert result.stdout == "out\n"
        assert result.stderr == "err\n"

    async def test_large_output(self, make_mdsel):
        binary = make_mdsel("i=0; while [ $i -lt 20000 ]; do echo line$i; i=$((i+1)); done")
        result = await MdselExecutor(binary=binary).execute("index", ["x.md"])
        lines = result.stdout.splitlines()
        assert len(lines) == 20000
        assert lines[-1] == "line19999"

    async def test_utf8_output(self, make_mdsel):
        binary = make_mdsel("printf 'héllo ✓\\n'")
        result = await MdselExecutor(binary=binary).execute("index", ["x.md"])
        assert result.stdout == "héllo ✓\n"

    async def test_binary_not_found(self, tmp_path):
        missing = str(tmp_path / "no-such-mdsel")
        result = await MdselExecutor(binary=missing).execute("index", ["x.md"])
        assert not result.success
        assert result.exit_code == 1
        assert "mdsel CLI not found" in result.stderr
        assert missing in result.stderr

    async def test_binary_not_executable(self, tmp_path):
        path = tmp_path / "mdsel"
        path.write_text("#!/bin/sh\necho hi\n")
        path.chmod(0o644)
        result = await MdselExecutor(binary=str(path)).execute("index", ["x.md"])
        assert not result.success
        assert result.exit_code == 1
        assert "Permission denied" in result.stderr

    async def test_unsupported_command(self, echo_mdsel):
        result = await MdselExecutor(binary=echo_mdsel).execute("render", ["x.md"])
        assert not result.success
        assert result.exit_code == 1
        assert "Unsupported mdsel command: render" in result.stderr
        assert result.stdout == ""

    async def test_timeout(self, make_mdsel):
        binary = make_mdsel("echo partial; sleep 10")
        executor = MdselExecutor(binary=binary, timeout_ms=300)
        result = await executor.execute("index", ["x.md"])
        assert result.timed_out
        assert not result.success
        assert result.exit_code is None
        assert result.stdout == "partial\n"
        assert "mdsel command timed out after 300ms" in result.stderr
        assert result.duration_ms < 5000

    async def test_timeout_escalates_to_kill(self, make_mdsel):
        binary = make_mdsel("trap '' TERM; sleep 10")
        executor = MdselExecutor(binary=binary, timeout_ms=200, kill_grace_ms=200)
        result = await executor.execute("index", ["x.md"])
        assert result.timed_out
        assert result.exit_code is None
        assert result.duration_ms < 5000

    async def test_nul_byte_in_argument(self, echo_mdsel):
        result = await MdselExecutor(binary=echo_mdsel).execute("index", ["a\x00b.md"])
        assert not result.success
        assert result.exit_code == 1
        assert "null byte" in result.stderr

    async def test_cancel_kills_child(self, make_mdsel, tmp_path):
        pidfile = tmp_path / "pid"
        binary = make_mdsel(f'echo $$ > "{pidfile}"; exec sleep 30')
        task = asyncio.ensure_future(MdselExecutor(binary=binary).execute("index", []))
        for _ in range(100):
            if pidfile.exists() and pidfile.read_text().strip():
                break
            await asyncio.sleep(0.05)
        pid = int(pidfile.read_text())

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        with pytest.raises(ProcessLookupError):
            os.kill(pid, 0)

    async def test_working_dir(self, make_mdsel, tmp_path):
        sub = tmp_path / "docs"
        sub.mkdir()
        binary = make_mdsel("pwd")
        result = await MdselExecutor(binary=binary, working_dir=str(sub)).execute("index", [])
        assert Path(result.stdout.strip()).resolve() == sub.resolve()

    async def test_env_vars(self, make_mdsel):
        binary = make_mdsel('printf %s "$MDSEL_TEST_VAR"')
        executor = MdselExecutor(binary=binary, env_vars={"MDSEL_TEST_VAR": "hello123"})
        result = await executor.execute("index", [])
        assert result.stdout == "hello123"

    async def test_secrets_not_inherited(self, make_mdsel, monkeypatch):
        monkeypatch.setenv("SOME_SERVICE_API_KEY", "sk-secret")
        binary = make_mdsel('printf %s "${SOME_SERVICE_API_KEY:-unset}"')
        result = await MdselExecutor(binary=binary).execute("index", [])
        assert result.stdout == "unset"

    async def test_concurrent_calls_are_independent(self, echo_mdsel):
        executor = MdselExecutor(binary=echo_mdsel)
        results = await asyncio.gather(
            executor.execute("index", ["a.md"]),
            executor.execute("select", ["h1.0", "b.md"]),
            executor.execute("index", ["c.md"]),
        )
        assert [r.stdout.splitlines() for r in results] == [
            ["index", "a.md"],
            ["select", "h1.0", "b.md"],
            ["index", "c.md"],
        ]

    def test_from_config(self):
        config = Config(mdsel_path="/x/mdsel", timeout_ms=1234, kill_grace_ms=10)
        executor = MdselExecutor.from_config(config)
        assert executor.binary == "/x/mdsel"
        assert executor.timeout_ms == 1234
        assert executor.kill_grace_ms == 10


class TestExecuteFunction:
    async def test_uses_config(self, echo_mdsel):
        result = await execute("index", ["r.md"], config=Config(mdsel_path=echo_mdsel))
        assert isinstance(result, ExecutionResult)
        assert result.stdout.splitlines() == ["index", "r.md"]

    async def test_missing_default_binary_resolves(self, monkeypatch, tmp_path):
        monkeypatch.setenv("PATH", str(tmp_path))
        result = await execute("index", ["r.md"])
        assert not result.success
        assert "mdsel CLI not found at mdsel" in result.stderr
