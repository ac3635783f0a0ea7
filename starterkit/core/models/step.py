"""
Step and Operation models — what the orchestrator runs.

An Operation is a named, externally invocable unit of work with a
parameter schema and a planner that produces its ordered Steps. A Step
is one unit inside that sequence: a description, zero or more Actions,
an optional applicability predicate, and a fatality flag.

Operations are registered once at import time and never change.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from starterkit.core.models.action import Action
from starterkit.core.models.state import Capability, ProjectState

if TYPE_CHECKING:
    from starterkit.core.engine.executor import RunContext
    from starterkit.core.models.report import RunReport


class StepStatus(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class Step:
    """One ordered unit of work inside an operation.

    ``when`` is evaluated against a freshly detected ProjectState right
    before the step would run; returning False skips the step and records
    ``skip_message``. A non-fatal step that fails is recorded and the
    sequence continues.
    """

    description: str
    actions: list[Action] = field(default_factory=list)
    when: Callable[[ProjectState], bool] | None = None
    skip_message: str = ""
    fatal: bool = True


@dataclass(frozen=True)
class Precondition:
    """A capability check run before any step of an operation.

    ``present`` is the required state of the capability: True for
    prerequisites, False for "already installed" guards. ``flag`` names
    a boolean parameter that must be true for the check to apply.
    """

    capability: Capability
    present: bool
    message: str
    flag: str | None = None

    def applies(self, params: BaseModel) -> bool:
        if self.flag is None:
            return True
        return bool(getattr(params, self.flag, False))


def requires(capability: Capability, message: str, flag: str | None = None) -> Precondition:
    return Precondition(capability=capability, present=True, message=message, flag=flag)


def refuses(capability: Capability, message: str) -> Precondition:
    return Precondition(capability=capability, present=False, message=message)


Planner = Callable[[Any, "RunContext"], list[Step]]
Summarizer = Callable[[Any, "RunReport", "RunContext"], str]


@dataclass(frozen=True)
class Operation:
    """A registered, externally invocable operation.

    ``checks_system`` asks the router to check git, node and the package
    manager before the run; a failed check refuses the request.
    """

    name: str
    description: str
    params_model: type[BaseModel]
    plan: Planner
    summarize: Summarizer
    preconditions: tuple[Precondition, ...] = ()
    requires_project: bool = True
    warn_if_not_empty: bool = False
    checks_system: bool = False

    def input_schema(self) -> dict[str, Any]:
        """JSON schema advertised to external callers."""
        return self.params_model.model_json_schema(by_alias=True)
