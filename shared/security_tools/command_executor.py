"""
Command executor for read-only cloud CLI commands.

Every command is validated before anything is spawned; a rejected command
produces a CommandResult carrying the validation error and no process is
ever started for it. Accepted commands are split on whitespace and run as
a plain argv, never through a shell.
"""
from __future__ import annotations

import asyncio
import codecs
import logging

from config.constants import MAX_STDOUT_BYTES
from shared.models.discovery import CommandResult
from shared.models.errors import CommandValidationError
from shared.security_tools.command_validator import validate_command
from shared.security_tools.common import run_argv_async

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


def truncate_stdout(data: bytes, limit: int = MAX_STDOUT_BYTES) -> bytes:
    return data[:limit] if len(data) > limit else data


def decode_stdout(data: bytes) -> str:
    """Decode UTF-8, replacing invalid bytes; a multi-byte character cut at the end is dropped."""
    return codecs.getincrementaldecoder("utf-8")(errors="replace").decode(data, final=False)


class CommandExecutor:
    """Runs validated gcloud/aws commands with a per-command timeout.

    The instance only holds its timeout, so one executor can serve any
    number of concurrent ``execute`` calls.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be > 0")
        self._timeout = float(timeout)

    @property
    def timeout(self) -> float:
        return self._timeout

    def _effective_timeout(self, deadline: float | None) -> float:
        if deadline is None:
            return self._timeout
        remaining = deadline - asyncio.get_running_loop().time()
        return max(0.0, min(self._timeout, remaining))

    async def execute(self, command: str, *, deadline: float | None = None) -> CommandResult:
        """
        Validate and run *command*.

        *deadline* is an absolute ``loop.time()`` value from the caller's
        overall budget; whichever of it and the per-command timeout comes
        first bounds the process.
        """
        try:
            validate_command(command)
        except CommandValidationError as exc:
            logger.warning("command_rejected command=%r reason=%s", command, exc)
            return CommandResult(
                command=command,
                error=f"validation failed: {exc}",
                error_kind="validation",
            )

        argv = command.split()
        timeout = self._effective_timeout(deadline)
        if timeout <= 0:
            logger.warning("command_skipped reason=deadline_exceeded command=%r", command)
            return CommandResult(
                command=command,
                exit_code=-1,
                error="discovery deadline exceeded before command started",
                error_kind="execution",
            )
        logger.info("command_start argv0=%s timeout=%.1fs command=%r", argv[0], timeout, command)

        try:
            outcome = await run_argv_async(argv, timeout)
        except OSError as exc:
            logger.warning("command_spawn_failed command=%r error=%s", command, exc)
            return CommandResult(
                command=command,
                exit_code=-1,
                error=f"failed to start {argv[0]}: {exc}",
                error_kind="execution",
            )

        if outcome.timed_out:
            logger.warning("command_timeout command=%r timeout=%.1fs", command, timeout)
            return CommandResult(
                command=command,
                exit_code=-1,
                error=f"command timed out after {timeout:g}s",
                error_kind="execution",
            )

        stdout = decode_stdout(truncate_stdout(outcome.stdout))
        stderr = outcome.stderr.decode("utf-8", errors="replace")
        result = CommandResult(
            command=command,
            stdout=stdout,
            stderr=stderr,
            exit_code=outcome.returncode,
        )
        if outcome.returncode != 0:
            result.error = f"exit status {outcome.returncode}"
            result.error_kind = "execution"
            logger.warning(
                "command_failed command=%r exit_code=%s stderr=%r",
                command,
                outcome.returncode,
                stderr.strip()[:500],
            )
        else:
            logger.info("command_complete command=%r stdout_bytes=%s", command, len(outcome.stdout))
        return result
