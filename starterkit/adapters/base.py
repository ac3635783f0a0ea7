"""
Adapter contract — how the step runner reaches the outside world.

Operations only describe Actions. Something has to turn an Action into
a side effect on the target project (spawn the package manager, write a
template file) and report back; that is an adapter. The step runner
never calls subprocess or touches files itself.

Two adapters exist in production, keyed by name:

    shell       run one command in the project directory
    filesystem  write, merge or append project files

Tests swap in their own ``shell`` adapter to fake the toolchain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from starterkit.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """One Action bound to the project it runs against."""

    action: Action
    project_root: str = "."
    timeout: int = 300
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        # A step may run a command in a subdirectory via params["cwd"]
        return self.params.get("cwd") or self.project_root


class Adapter(ABC):
    """Performs an Action and reports the outcome as a Receipt.

    ``execute`` must not raise: a failed command or an unwritable file is
    a ``failed`` receipt carrying the error text. The registry still
    guards against adapters that break this rule.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Key the registry dispatches on (the Action's ``adapter`` field)."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing tool exists on this host. Cheap, never raises."""

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Pre-flight check run before ``execute``; ``(ok, reason)``."""
        return True, ""

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Carry out ``context.action``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"
