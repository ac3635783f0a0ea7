"""
System checks — inspect the host toolchain before a full scaffold.

Node and the package manager are hard requirements: without them the
framework generator cannot run at all. An old git is only a warning;
the git-hook step is skipped with an explanation instead.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from starterkit.adapters.shell.command import run_command
from starterkit.core.config.loader import Settings
from starterkit.core.errors import ExecutionError

logger = logging.getLogger(__name__)

_CHECK_TIMEOUT = 15  # seconds

CommandRunner = Callable[[str], str]


def _default_runner(command: str) -> str:
    return run_command(command, Path.cwd(), timeout=_CHECK_TIMEOUT)


@dataclass
class ToolCheck:
    """Result of probing one tool."""

    name: str
    valid: bool
    version: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "valid": self.valid, "version": self.version, "error": self.error}


@dataclass
class SystemReport:
    """Aggregate of all checks."""

    git: ToolCheck
    node: ToolCheck
    package_manager: ToolCheck
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def git_ok(self) -> bool:
        return self.git.valid

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "checks": {c.name: c.to_dict() for c in (self.git, self.node, self.package_manager)},
            "errors": self.errors,
            "warnings": self.warnings,
        }


def parse_version(text: str) -> tuple[int, ...] | None:
    """First dotted version number found in ``text``."""
    match = re.search(r"(\d+)\.(\d+)(?:\.(\d+))?", text)
    if not match:
        return None
    return tuple(int(g) for g in match.groups() if g is not None)


def check_git(settings: Settings, runner: CommandRunner = _default_runner) -> ToolCheck:
    try:
        output = runner("git --version")
    except ExecutionError as e:
        return ToolCheck("git", False, error=f"Git not found or not accessible: {e.detail or e}")

    version = parse_version(output)
    if version is None:
        return ToolCheck("git", False, error="Could not parse Git version")

    text = ".".join(str(p) for p in version)
    if version < settings.min_git_tuple:
        return ToolCheck(
            "git",
            False,
            version=text,
            error=(
                f"Git version {text} is too old. Lefthook requires Git "
                f"{settings.min_git_version} or newer."
            ),
        )
    return ToolCheck("git", True, version=text)


def check_node(settings: Settings, runner: CommandRunner = _default_runner) -> ToolCheck:
    try:
        output = runner("node --version")
    except ExecutionError as e:
        return ToolCheck("node", False, error=f"Node.js not found: {e.detail or e}")

    version = parse_version(output)
    if version is None:
        return ToolCheck("node", False, error="Could not determine Node.js version")

    text = output.strip()
    if version[0] < settings.min_node_major:
        return ToolCheck(
            "node",
            False,
            version=text,
            error=(
                f"Node.js version {text} is too old. Next.js requires Node.js "
                f"{settings.min_node_major} or newer."
            ),
        )
    return ToolCheck("node", True, version=text)


def check_package_manager(settings: Settings, runner: CommandRunner = _default_runner) -> ToolCheck:
    pm = settings.package_manager
    try:
        output = runner(f"{pm} --version")
    except ExecutionError:
        return ToolCheck(pm, False, error=f"{pm} not found. Please install {pm}: npm install -g {pm}")
    return ToolCheck(pm, True, version=output.strip())


def check_system_requirements(
    settings: Settings,
    runner: CommandRunner = _default_runner,
) -> SystemReport:
    """Run every check and classify failures as errors or warnings."""
    git = check_git(settings, runner)
    node = check_node(settings, runner)
    pm = check_package_manager(settings, runner)

    report = SystemReport(git=git, node=node, package_manager=pm)
    if not node.valid:
        report.errors.append(node.error or "Node.js check failed")
    if not pm.valid:
        report.errors.append(pm.error or f"{pm.name} check failed")
    if not git.valid:
        report.warnings.append(f"{git.error} Git hooks will be skipped.")

    for warning in report.warnings:
        logger.warning(warning)
    for error in report.errors:
        logger.error(error)
    return report
