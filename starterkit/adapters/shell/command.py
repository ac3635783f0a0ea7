"""
Shell command adapter — run one external command with a hard timeout.

``run_command`` is the executor primitive: a single attempt, no
retries, stdout returned on success and every failure normalized into
an ExecutionError. ``ShellCommandAdapter`` wraps it in the adapter
protocol so the orchestrator gets a Receipt instead of an exception.

Many scaffolding CLIs print warnings on stderr and still exit 0, while
some report real failures on stderr with exit 0. The stderr rule below
treats text containing "error" (any case) as fatal unless it also
carries a "WARN" or "warning" marker. It is a heuristic and is kept
exactly as is: a benign line such as "ErrorBoundary generated" with no
warning marker will fail the command.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from pathlib import Path

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.core.errors import ExecutionError
from starterkit.core.models.action import Receipt

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 300  # seconds

_LOG_PREVIEW = 500


def stderr_is_fatal(stderr: str) -> bool:
    """Classify stderr text from a process that exited 0."""
    if not stderr:
        return False
    return "error" in stderr.lower() and "WARN" not in stderr and "warning" not in stderr


def run_command(command: str, cwd: str | Path, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Run a shell command in ``cwd`` and return its stdout.

    Raises:
        ExecutionError: on timeout, non-zero exit, a disqualifying
            stderr message, or when the process cannot be spawned.
    """
    logger.debug("Running command: %s in %s", command, cwd)

    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise ExecutionError(command, "timeout", f"Command timed out after {timeout}s") from None
    except OSError as e:
        raise ExecutionError(command, "spawn-error", str(e)) from e

    stdout = result.stdout or ""
    stderr = (result.stderr or "").strip()

    if stdout:
        preview = stdout[:_LOG_PREVIEW] + ("..." if len(stdout) > _LOG_PREVIEW else "")
        logger.debug("Command stdout: %s", preview)
    if stderr:
        logger.debug("Command stderr: %s", stderr)

    if result.returncode != 0:
        raise ExecutionError(
            command,
            "nonzero-exit",
            stderr or stdout.strip() or f"Command exited with code {result.returncode}",
        )

    if stderr_is_fatal(stderr):
        raise ExecutionError(command, "stderr-error", stderr)

    logger.debug("Command completed successfully")
    return stdout


class ShellCommandAdapter(Adapter):
    """Execute shell commands and capture output.

    Action params:
        command (str): The command to execute.
        timeout (int): Timeout in seconds (default: context timeout).
        cwd (str): Override working directory (default: project root).
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command", "")
        if not command:
            return False, "Missing required param: 'command'"

        cwd = context.working_dir
        if not Path(cwd).is_dir():
            return False, f"Working directory does not exist: {cwd}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.params["command"]
        start = time.monotonic()

        try:
            output = run_command(command, context.working_dir, timeout=context.timeout)
        except ExecutionError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=str(e),
                duration_ms=int((time.monotonic() - start) * 1000),
                metadata={"command": command, "reason": e.reason},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=output.strip(),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"command": command},
        )
