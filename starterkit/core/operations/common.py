"""
Shared building blocks for operation modules.

Parameter models use camelCase aliases on the wire and snake_case in
Python. Step builders keep plans declarative: a planner returns a list
of ``Step`` objects and never touches the filesystem itself.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from starterkit.core.models.action import Action
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability, ProjectState
from starterkit.core.models.step import Step

MANIFEST = "package.json"

NEXTJS_MISSING = (
    "Next.js project not found. Run 'create_nextjs_base' first to set up the basic project structure."
)


class OperationParams(BaseModel):
    """Base for every parameter model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProjectParams(OperationParams):
    project_path: str = Field(alias="projectPath", min_length=1, description="Project directory path")
    project_name: str | None = Field(default=None, alias="projectName", description="Project name (optional)")


# ── Actions ─────────────────────────────────────────────────────


def write(path: str, content: str, if_missing: bool = False) -> Action:
    return Action.file("write", path, content=content, if_missing=if_missing)


def write_json(path: str, data: Any, if_missing: bool = False) -> Action:
    return Action.file("write_json", path, content=data, if_missing=if_missing)


def merge_json(path: str, updates: dict[str, Any]) -> Action:
    return Action.file("merge_json", path, content=updates)


def add_scripts(scripts: dict[str, str]) -> Action:
    return merge_json(MANIFEST, {"scripts": scripts})


def marker(directory: str) -> Action:
    return Action.file("marker", directory)


def mkdir(directory: str) -> Action:
    return Action.file("mkdir", directory)


def append_lines(path: str, lines: Iterable[str]) -> Action:
    return Action.file("append_lines", path, content=list(lines))


def write_many(files: dict[str, str], prefix: str = "") -> list[Action]:
    return [write(f"{prefix}{name}", content) for name, content in files.items()]


# ── Step predicates ─────────────────────────────────────────────


def has(capability: Capability) -> Callable[[ProjectState], bool]:
    return lambda state: state.has(capability)


def lacks(capability: Capability) -> Callable[[ProjectState], bool]:
    return lambda state: not state.has(capability)


def step(
    description: str,
    *actions: Action | list[Action],
    when: Callable[[ProjectState], bool] | None = None,
    skip: str = "",
    fatal: bool = True,
) -> Step:
    flat: list[Action] = []
    for a in actions:
        if isinstance(a, list):
            flat.extend(a)
        else:
            flat.append(a)
    return Step(description=description, actions=flat, when=when, skip_message=skip, fatal=fatal)


# ── Summaries ───────────────────────────────────────────────────


def success_message(
    title: str,
    report: RunReport,
    details: str = "",
    next_steps: list[str] | None = None,
) -> str:
    parts = [
        f"🎉 {title}",
        f"⏱️ Total time: {report.elapsed:.2f}s",
        f"✅ Completed steps:\n{report.render_steps()}",
    ]
    if details:
        parts.append(details)
    if next_steps:
        parts.append("💡 **Next steps:**\n" + "\n".join(f"{i}. {s}" for i, s in enumerate(next_steps, 1)))
    return "\n\n".join(parts)


def bullet(lines: Iterable[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)
