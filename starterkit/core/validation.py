"""
Input validation — check a request before anything touches the disk.

Schema problems are reported without side effects. Only a structurally
valid request gets its target directory resolved, created if absent and
checked for write access; failing that is still a validation error, so a
bad path never reaches an external command.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from starterkit.core.models.report import ValidationResult
from starterkit.core.models.step import Operation

logger = logging.getLogger(__name__)


def format_errors(exc: ValidationError) -> list[str]:
    """One human-readable string per schema violation."""
    errors = []
    for issue in exc.errors():
        where = ".".join(str(p) for p in issue.get("loc", ()))
        message = issue.get("msg", "invalid value")
        errors.append(f"{where}: {message}" if where else message)
    return errors


def resolve_parameters(operation: Operation, raw: Mapping[str, Any] | None) -> BaseModel:
    """Merge caller fields over the operation's declared defaults.

    Raises:
        pydantic.ValidationError: on any schema violation.
    """
    return operation.params_model.model_validate(dict(raw or {}))


def _prepare_directory(path: Path) -> str | None:
    """Create ``path`` if needed and confirm it is writable. Returns an error or None."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return f"Cannot create project path {path}: {e.strerror or e}"
    if not path.is_dir():
        return f"Project path is not a directory: {path}"
    if not os.access(path, os.W_OK):
        return f"Cannot access or write to project path: {path}"
    return None


def _visible_entries(path: Path) -> list[str]:
    return sorted(p.name for p in path.iterdir() if not p.name.startswith("."))


def validate(operation: Operation, raw: Mapping[str, Any] | None) -> ValidationResult:
    """Check ``raw`` against ``operation``'s schema and prepare its target.

    On success ``params`` holds the merged parameter model with
    ``project_path`` replaced by the resolved absolute path.
    """
    try:
        params = resolve_parameters(operation, raw)
    except ValidationError as e:
        errors = format_errors(e)
        logger.debug("Validation failed for %s: %s", operation.name, errors)
        return ValidationResult(valid=False, errors=errors)

    project_path = getattr(params, "project_path", None)
    if not project_path:
        if operation.requires_project:
            return ValidationResult(valid=False, errors=["projectPath: Field required"])
        return ValidationResult(valid=True, params=params)

    resolved = Path(project_path).expanduser().resolve()
    error = _prepare_directory(resolved)
    if error:
        return ValidationResult(valid=False, errors=[error])

    warnings: list[str] = []
    if operation.warn_if_not_empty and _visible_entries(resolved):
        warnings.append(f"Directory {resolved} is not empty. Existing files may be overwritten.")

    params = params.model_copy(update={"project_path": str(resolved)})
    return ValidationResult(valid=True, warnings=warnings, params=params)
