"""
Filesystem adapter — materialize template content into a target project.

The helper functions do the work and raise MaterializeError with the
offending path; ``FilesystemAdapter`` exposes them as receipt-returning
operations the orchestrator can dispatch.

Rules:
    - Parent directories are always created before a leaf is written.
    - Structured documents (package.json and friends) are read, merged
      and written back, never replaced wholesale: several operations
      extend the same manifest across separate invocations.
    - ``.gitkeep`` markers are only written into directories that hold
      nothing but hidden entries and README.md.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.core.errors import MaterializeError
from starterkit.core.models.action import Receipt

logger = logging.getLogger(__name__)

MARKER_FILE = ".gitkeep"
_INCIDENTAL_FILES = frozenset({"README.md"})


def resolve(root: str | Path, rel: str | Path) -> Path:
    """Resolve ``rel`` against the project root.

    Raises:
        MaterializeError: the path lands outside ``root``.
    """
    base = Path(root).resolve()
    target = (base / rel).resolve()
    if not target.is_relative_to(base):
        raise MaterializeError(str(rel), f"path escapes the project directory {base}")
    return target


def _atomic_write(target: Path, content: str) -> None:
    """Write via temp file + rename in the same directory."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.replace(target)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def write_text(root: str | Path, rel: str | Path, content: str, if_missing: bool = False) -> bool:
    """Write a text file. Returns False when ``if_missing`` kept an existing file."""
    target = resolve(root, rel)
    if if_missing and target.exists():
        logger.debug("Keeping existing %s", target)
        return False
    try:
        _atomic_write(target, content)
    except OSError as e:
        raise MaterializeError(str(target), str(e)) from e
    logger.debug("Wrote %s (%d bytes)", target, len(content))
    return True


def read_json(root: str | Path, rel: str | Path) -> dict[str, Any]:
    """Load a JSON object. Missing file → empty dict."""
    target = resolve(root, rel)
    if not target.exists():
        return {}
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise MaterializeError(str(target), f"cannot read JSON: {e}") from e
    if not isinstance(data, dict):
        raise MaterializeError(str(target), f"expected a JSON object, got {type(data).__name__}")
    return data


def write_json(root: str | Path, rel: str | Path, data: Any, if_missing: bool = False) -> bool:
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return write_text(root, rel, content, if_missing=if_missing)


def merge_documents(existing: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Merge ``updates`` into ``existing`` one level deep.

    Top-level keys from ``updates`` win. Where both sides hold a mapping
    (``scripts``, ``dependencies``...) the mappings are merged key by key,
    so sibling entries written by an earlier operation survive.
    """
    merged = dict(existing)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def merge_json(root: str | Path, rel: str | Path, updates: dict[str, Any]) -> dict[str, Any]:
    """Read-modify-write a JSON document. Returns the merged document."""
    merged = merge_documents(read_json(root, rel), updates)
    write_json(root, rel, merged)
    return merged


def ensure_dir(root: str | Path, rel: str | Path) -> Path:
    target = resolve(root, rel)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise MaterializeError(str(target), str(e)) from e
    return target


def has_significant_files(directory: Path) -> bool:
    """True if the directory holds anything besides hidden files and README.md."""
    try:
        entries = [p.name for p in directory.iterdir()]
    except FileNotFoundError:
        return False
    except OSError as e:
        raise MaterializeError(str(directory), str(e)) from e
    return any(not name.startswith(".") and name not in _INCIDENTAL_FILES for name in entries)


def ensure_marker(root: str | Path, rel_dir: str | Path) -> bool:
    """Create ``rel_dir`` and drop a ``.gitkeep`` into it when it is otherwise empty.

    Returns True when a marker was written.
    """
    directory = ensure_dir(root, rel_dir)
    if has_significant_files(directory):
        logger.debug("Skipping %s for %s (has files)", MARKER_FILE, directory)
        return False
    marker = directory / MARKER_FILE
    if marker.exists():
        return False
    write_text(directory, MARKER_FILE, "")
    return True


def append_lines(root: str | Path, rel: str | Path, lines: list[str]) -> int:
    """Append each line not already present. Returns how many were added."""
    target = resolve(root, rel)
    try:
        existing = target.read_text(encoding="utf-8") if target.exists() else ""
    except OSError as e:
        raise MaterializeError(str(target), str(e)) from e

    present = set(existing.splitlines())
    missing = [line for line in lines if line not in present]
    if not missing:
        return 0

    prefix = existing if not existing or existing.endswith("\n") else existing + "\n"
    write_text(root, rel, prefix + "\n".join(missing) + "\n")
    return len(missing)


class FilesystemAdapter(Adapter):
    """File and directory materialization with receipts.

    Action params:
        operation (str): One of 'write', 'write_json', 'merge_json',
            'marker', 'mkdir', 'append_lines'.
        path (str): Target path (relative to the project root or absolute).
        content (str | dict | list): Payload for write operations.
        if_missing (bool): Keep an existing file ('write', 'write_json').
    """

    OPERATIONS = frozenset({"write", "write_json", "merge_json", "marker", "mkdir", "append_lines"})
    _NEEDS_CONTENT = frozenset({"write", "write_json", "merge_json", "append_lines"})

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        params = context.action.params
        operation = params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"
        if operation not in self.OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self.OPERATIONS))}"
        if not params.get("path"):
            return False, "Missing required param: 'path'"
        if operation in self._NEEDS_CONTENT and "content" not in params:
            return False, f"Missing required param: 'content' for {operation} operation"
        if operation == "merge_json" and not isinstance(params["content"], dict):
            return False, "merge_json content must be a mapping"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.action.params
        operation = params["operation"]
        root = context.project_root
        path = params["path"]

        try:
            if operation == "write":
                written = write_text(root, path, params["content"], if_missing=params.get("if_missing", False))
                output = f"Written {path}" if written else f"Kept existing {path}"
            elif operation == "write_json":
                written = write_json(root, path, params["content"], if_missing=params.get("if_missing", False))
                output = f"Written {path}" if written else f"Kept existing {path}"
            elif operation == "merge_json":
                merge_json(root, path, params["content"])
                output = f"Merged {', '.join(params['content'])} into {path}"
            elif operation == "marker":
                added = ensure_marker(root, path)
                output = f"Marker added to {path}" if added else f"Marker skipped for {path}"
            elif operation == "mkdir":
                ensure_dir(root, path)
                output = f"Directory ensured: {path}"
            else:
                added = append_lines(root, path, list(params["content"]))
                output = f"Appended {added} line(s) to {path}"
        except MaterializeError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": e.path},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=output,
            metadata={"operation": operation, "path": str(resolve(root, path))},
        )
