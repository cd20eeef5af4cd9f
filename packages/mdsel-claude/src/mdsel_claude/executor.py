"""Run the mdsel CLI as a child process."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from mdsel_claude.config import (
    DEFAULT_KILL_GRACE_MS,
    DEFAULT_MDSEL_PATH,
    DEFAULT_TIMEOUT_MS,
    Config,
)
from mdsel_claude.errors import MdselTimeoutError, spawn_error
from mdsel_claude.types import ExecutionResult

logger = logging.getLogger(__name__)

_READ_CHUNK = 65536

# Patterns to exclude from the child's environment
_SECRET_PATTERNS = ("_API_KEY", "_SECRET", "_TOKEN", "_PASSWORD", "_CREDENTIAL")


class MdselCommand(str, Enum):
    INDEX = "index"
    SELECT = "select"


@runtime_checkable
class Executor(Protocol):
    """Anything that can run an mdsel subcommand."""

    async def execute(
        self, command: MdselCommand | str, args: Sequence[str]
    ) -> ExecutionResult: ...


def _filter_env(extra: dict[str, str] | None = None) -> dict[str, str]:
    """Build a filtered environment dict, excluding secrets."""
    env = {
        key: val
        for key, val in os.environ.items()
        if not any(pat in key.upper() for pat in _SECRET_PATTERNS)
    }
    if extra:
        env.update(extra)
    return env


async def _drain(stream: asyncio.StreamReader | None) -> bytes:
    if stream is None:
        return b""
    chunks: list[bytes] = []
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def _signal_group(proc: asyncio.subprocess.Process, sig: signal.Signals) -> None:
    try:
        os.killpg(proc.pid, sig)
    except (ProcessLookupError, PermissionError):
        pass


async def _reap(proc: asyncio.subprocess.Process, *tasks: asyncio.Future) -> None:
    """SIGKILL the process group, then wait for the child and the pipe readers."""
    _signal_group(proc, signal.SIGKILL)
    for task in tasks:
        task.cancel()
    await asyncio.shield(asyncio.gather(proc.wait(), *tasks, return_exceptions=True))


class MdselExecutor:
    """Spawns ``mdsel <command> <args...>`` and normalizes the outcome.

    Every failure mode, including spawn errors and timeouts, comes back as an
    ExecutionResult; ``execute`` does not raise.
    """

    def __init__(
        self,
        binary: str = DEFAULT_MDSEL_PATH,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        kill_grace_ms: int = DEFAULT_KILL_GRACE_MS,
        working_dir: str | None = None,
        env_vars: dict[str, str] | None = None,
    ) -> None:
        self.binary = binary
        self.timeout_ms = timeout_ms
        self.kill_grace_ms = kill_grace_ms
        self.working_dir = working_dir
        self.env_vars = env_vars

    @classmethod
    def from_config(cls, config: Config) -> MdselExecutor:
        return cls(
            binary=config.mdsel_path,
            timeout_ms=config.timeout_ms,
            kill_grace_ms=config.kill_grace_ms,
        )

    async def execute(
        self, command: MdselCommand | str, args: Sequence[str]
    ) -> ExecutionResult:
        try:
            cmd = MdselCommand(command)
        except ValueError:
            return ExecutionResult(
                stderr=f"Unsupported mdsel command: {command}", exit_code=1
            )

        argv = [self.binary, cmd.value, *args]
        start = time.monotonic()
        logger.debug("spawning %s", argv)

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.working_dir,
                env=_filter_env(self.env_vars),
                start_new_session=True,
            )
        except (OSError, ValueError, TypeError) as e:
            # ValueError covers NUL bytes in argv
            err = spawn_error(self.binary, e)
            logger.warning("failed to start mdsel: %s", err)
            return ExecutionResult(
                stderr=str(err),
                exit_code=1,
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        stdout_task = asyncio.ensure_future(_drain(proc.stdout))
        stderr_task = asyncio.ensure_future(_drain(proc.stderr))

        timed_out = False
        try:
            try:
                await asyncio.wait_for(proc.wait(), timeout=self.timeout_ms / 1000.0)
            except asyncio.TimeoutError:
                timed_out = True
                logger.warning(
                    "mdsel %s exceeded %dms, sending SIGTERM", cmd.value, self.timeout_ms
                )
                _signal_group(proc, signal.SIGTERM)
                try:
                    await asyncio.wait_for(
                        proc.wait(), timeout=self.kill_grace_ms / 1000.0
                    )
                except asyncio.TimeoutError:
                    logger.warning("mdsel %s ignored SIGTERM, sending SIGKILL", cmd.value)
                    _signal_group(proc, signal.SIGKILL)
                    await proc.wait()

            stdout, stderr = await asyncio.gather(stdout_task, stderr_task)
        except asyncio.CancelledError:
            logger.debug("mdsel %s cancelled, killing process group", cmd.value)
            await _reap(proc, stdout_task, stderr_task)
            raise

        stderr_text = stderr.decode(errors="replace")

        code = proc.returncode
        # negative return codes mean the child died from a signal
        exit_code = code if code is not None and code >= 0 else None

        if timed_out:
            exit_code = None
            if stderr_text and not stderr_text.endswith("\n"):
                stderr_text += "\n"
            stderr_text += str(MdselTimeoutError(self.timeout_ms))

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.debug(
            "mdsel %s exited with %s in %dms", cmd.value, exit_code, duration_ms
        )
        return ExecutionResult(
            stdout=stdout.decode(errors="replace"),
            stderr=stderr_text,
            exit_code=exit_code,
            timed_out=timed_out,
            duration_ms=duration_ms,
        )


async def execute(
    command: MdselCommand | str,
    args: Sequence[str],
    *,
    config: Config | None = None,
) -> ExecutionResult:
    """Run one mdsel subcommand with settings from ``config`` (defaults if None)."""
    return await MdselExecutor.from_config(config or Config()).execute(command, args)
