"""
Engine executor — the step sequencer.

Takes a validated operation request, checks its preconditions against
the live project state, expands it into ordered steps, dispatches each
step's actions through the adapter registry and records the outcome.

Flow:
    detect → preconditions → plan → for each step: (re-detect → gate →
    execute actions) → finalize report

Steps run strictly in order. The first fatal failure stops the run and
is raised as a StepFailedError carrying the steps completed so far;
nothing already done is rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel

from starterkit.adapters.registry import AdapterRegistry
from starterkit.core.config.loader import Settings
from starterkit.core.errors import PreconditionError, StepFailedError
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import ProjectState
from starterkit.core.models.step import Operation, Precondition, Step, StepStatus
from starterkit.core.observability.token_metrics import TokenTracker
from starterkit.core.services.detection import detect_project_state
from starterkit.core.services.system_checks import SystemReport

logger = logging.getLogger(__name__)

Detector = Callable[[str | Path], ProjectState]


@dataclass
class RunContext:
    """Everything one operation run needs besides its parameters."""

    project_root: Path
    registry: AdapterRegistry
    settings: Settings = field(default_factory=Settings)
    system: SystemReport | None = None
    detector: Detector = detect_project_state
    observer: TokenTracker | None = None

    def state(self) -> ProjectState:
        """Fresh snapshot of the target."""
        return self.detector(self.project_root)

    @property
    def package_manager(self) -> str:
        return self.settings.package_manager


def failed_preconditions(
    operation: Operation,
    params: BaseModel,
    state: ProjectState,
) -> list[Precondition]:
    return [
        p for p in operation.preconditions
        if p.applies(params) and state.has(p.capability) != p.present
    ]


def check_preconditions(operation: Operation, params: BaseModel, state: ProjectState) -> None:
    """Raise PreconditionError for the first failing check, before any step."""
    failed = failed_preconditions(operation, params, state)
    if failed:
        logger.info("Precondition failed for %s: %s", operation.name, failed[0].message)
        raise PreconditionError(failed[0].message)


def _run_step(step: Step, context: RunContext) -> str | None:
    """Dispatch every action of a step. Returns the first error, or None."""
    for action in step.actions:
        receipt = context.registry.execute_action(
            action,
            project_root=str(context.project_root),
            timeout=context.settings.command_timeout,
        )
        if receipt.failed:
            return receipt.error or f"{action.id} failed"
    return None


def run_operation(operation: Operation, params: BaseModel, context: RunContext) -> RunReport:
    """Execute one operation end to end.

    Raises:
        PreconditionError: before any step when the project is not in
            the required state.
        StepFailedError: on the first fatal step failure.
    """
    check_preconditions(operation, params, context.state())

    steps = operation.plan(params, context)
    report = RunReport(operation=operation.name, project_path=str(context.project_root))
    report.start()
    total = len(steps)

    for i, step in enumerate(steps, 1):
        logger.info("[STEP %d/%d] %s", i, total, step.description)

        if step.when is not None and not step.when(context.state()):
            report.record(step.description, StepStatus.SKIPPED, step.skip_message)
            logger.info("⊘ %s %s", step.description, step.skip_message)
            continue

        error = _run_step(step, context)
        if error is None:
            report.record(step.description, StepStatus.SUCCEEDED)
            logger.info("✓ %s", step.description)
            continue

        if not step.fatal:
            report.record(step.description, StepStatus.FAILED, error)
            logger.warning("✗ %s (continuing): %s", step.description, error)
            continue

        logger.error("✗ %s: %s", step.description, error)
        report.abort(step.description, error)
        raise StepFailedError(
            step=step.description,
            error=error,
            project_path=str(context.project_root),
            completed=report.completed,
        )

    report.complete()
    logger.info(
        "%s finished: %d completed, %d skipped, %d warnings in %.1fs",
        operation.name,
        len(report.completed),
        len(report.skipped),
        len(report.warnings),
        report.elapsed,
    )
    return report
