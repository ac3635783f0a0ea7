"""
Error taxonomy — every failure the core can report.

Validation and precondition errors are raised before any step runs and
never leave partial state. Execution and materialization errors are raised
mid-sequence; the orchestrator wraps the first fatal one in a
StepFailedError that carries the partial run record.

All of these are caught at the router boundary and converted into an
error-shaped response. Nothing here is meant to reach the transport.
"""

from __future__ import annotations


class StarterkitError(Exception):
    """Base class for all errors raised by the core."""


class RequestValidationError(StarterkitError):
    """Parameters failed schema checks, or the target path is unusable."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid parameters")


class UnknownOperationError(RequestValidationError):
    """The caller named an operation the router does not know."""

    def __init__(self, name: str):
        self.name = name
        super().__init__([f"Unknown tool: {name}"])


class PreconditionError(StarterkitError):
    """A capability operation's ordering or non-reentrancy check failed."""


class ExecutionError(StarterkitError):
    """An external command failed.

    ``reason`` is one of ``timeout``, ``stderr-error``, ``nonzero-exit``
    or ``spawn-error``. ``detail`` holds the captured diagnostic text.
    """

    def __init__(self, command: str, reason: str, detail: str = ""):
        self.command = command
        self.reason = reason
        self.detail = detail
        message = f'Command "{command}" failed ({reason})'
        if detail:
            message += f": {detail}"
        super().__init__(message)


class MaterializeError(StarterkitError):
    """A file or directory could not be read or written."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"{path}: {detail}")


class StepFailedError(StarterkitError):
    """A fatal step failure halted an operation.

    Carries everything a human needs to resume by hand: the failing
    step, the underlying error text, the resolved target path, and the
    ordered list of steps that had already completed.
    """

    def __init__(
        self,
        step: str,
        error: str,
        project_path: str,
        completed: list[str],
    ):
        self.step = step
        self.error = error
        self.project_path = project_path
        self.completed = list(completed)
        super().__init__(self.render())

    def render(self) -> str:
        lines = [
            f'❌ Failed at step: "{self.step}"',
            "",
            f"🔍 Error Details: {self.error}",
            "",
            f"📍 Project Path: {self.project_path}",
            "",
            "✅ Completed Steps:",
        ]
        if self.completed:
            lines.extend(f"{i}. {desc}" for i, desc in enumerate(self.completed, 1))
        else:
            lines.append("(none)")
        return "\n".join(lines)
