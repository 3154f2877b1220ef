"""
Common utilities for process execution.

Every helper here takes an argv list and starts the binary directly; no
shell is involved at any point. Two flavours are provided:

- blocking helpers (``run_command``, ``run_json_command``) for short fixed
  queries such as ``gcloud config get-value project``;
- ``run_argv_async`` for the discovery executor, which must honour a timeout
  and kill the child when it expires or when the awaiting task is cancelled.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
import json
import logging
import subprocess
from typing import Any, List, Sequence

logger = logging.getLogger(__name__)


def run_command(
    command: List[str], timeout_seconds: float = 10
) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except (subprocess.SubprocessError, OSError) as exc:
        logger.debug("run_command_failed argv0=%s error=%s", command[0] if command else "", exc)
        return None


def run_json_command(command: List[str], timeout_seconds: float = 10) -> tuple[Any, str | None]:
    result = run_command(command, timeout_seconds=timeout_seconds)
    if result is None:
        return None, "command execution failed"
    if result.returncode != 0:
        message = (result.stderr or result.stdout or "").strip()
        return None, message or f"command returned exit code {result.returncode}"
    try:
        return json.loads(result.stdout or "null"), None
    except json.JSONDecodeError:
        return None, "invalid json response"


@dataclass(frozen=True)
class ProcessOutcome:
    returncode: int
    stdout: bytes
    stderr: bytes
    timed_out: bool = False


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        return
    await process.wait()


async def run_argv_async(argv: Sequence[str], timeout: float) -> ProcessOutcome:
    """
    Run *argv* directly and collect stdout/stderr separately.

    On timeout the child is killed and ``timed_out`` is set. On cancellation
    the child is killed and the cancellation propagates. ``OSError`` from a
    missing binary propagates to the caller.
    """
    process = await asyncio.create_subprocess_exec(
        *argv,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=max(timeout, 0.0))
    except asyncio.TimeoutError:
        await _terminate(process)
        return ProcessOutcome(returncode=-1, stdout=b"", stderr=b"", timed_out=True)
    except asyncio.CancelledError:
        await _terminate(process)
        raise
    return ProcessOutcome(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout or b"",
        stderr=stderr or b"",
    )
