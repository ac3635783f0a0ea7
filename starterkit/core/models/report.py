"""
Run records — RunReport, ValidationResult and ToolResponse.

A RunReport is created empty at the start of a run, appended to as
each step finishes, and finalized once: either completed (rendered as a
success message) or aborted (wrapped in a StepFailedError). It is owned
by exactly one orchestrator invocation and never persisted.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from starterkit.core.models.step import RunStatus, StepStatus


@dataclass
class StepRecord:
    """Outcome of one step."""

    description: str
    status: StepStatus
    detail: str = ""


@dataclass
class RunReport:
    """Per-invocation record of step outcomes and timing."""

    operation: str
    project_path: str = ""
    status: RunStatus = RunStatus.NOT_STARTED
    records: list[StepRecord] = field(default_factory=list)
    failed_step: str | None = None
    error: str | None = None
    _started: float = field(default_factory=time.monotonic, repr=False)
    _ended: float | None = field(default=None, repr=False)

    def start(self) -> None:
        self._started = time.monotonic()
        self.status = RunStatus.IN_PROGRESS

    def record(self, description: str, status: StepStatus, detail: str = "") -> None:
        self.records.append(StepRecord(description, status, detail))

    def complete(self) -> None:
        self._ended = time.monotonic()
        self.status = RunStatus.COMPLETED

    def abort(self, step: str, error: str) -> None:
        self._ended = time.monotonic()
        self.status = RunStatus.ABORTED
        self.failed_step = step
        self.error = error

    @property
    def completed(self) -> list[str]:
        """Descriptions of the steps that succeeded, in order."""
        return [r.description for r in self.records if r.status == StepStatus.SUCCEEDED]

    @property
    def skipped(self) -> list[StepRecord]:
        return [r for r in self.records if r.status == StepStatus.SKIPPED]

    @property
    def warnings(self) -> list[StepRecord]:
        """Non-fatal failures."""
        return [r for r in self.records if r.status == StepStatus.FAILED]

    @property
    def elapsed(self) -> float:
        end = self._ended if self._ended is not None else time.monotonic()
        return end - self._started

    def render_steps(self) -> str:
        lines = [f"{i}. {desc}" for i, desc in enumerate(self.completed, 1)]
        for rec in self.skipped:
            lines.append(f"⊘ {rec.description} — {rec.detail}" if rec.detail else f"⊘ {rec.description}")
        for rec in self.warnings:
            lines.append(f"⚠️  {rec.description} — {rec.detail}")
        return "\n".join(lines)


class ValidationResult(BaseModel):
    """Outcome of checking a request against an operation's schema."""

    valid: bool = True
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    params: Any = None   # resolved parameter model when valid


class ToolResponse(BaseModel):
    """Uniform result handed back to the transport layer."""

    content: str
    is_error: bool = False

    def to_mcp(self) -> dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.content}],
            "isError": self.is_error,
        }
