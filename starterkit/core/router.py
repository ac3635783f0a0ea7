"""
Request router — the single entry point for invoking operations.

Flow per request:
    lookup → validate (schema, path) → system check (if required)
    → advisory lock → run_operation → summarize

The router is the only layer that turns core exceptions into an
error-shaped ToolResponse. ``dispatch`` never raises.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from starterkit.adapters.registry import AdapterRegistry
from starterkit.core.config.loader import Settings
from starterkit.core.engine.executor import RunContext, run_operation
from starterkit.core.errors import PreconditionError, RequestValidationError, StarterkitError, UnknownOperationError
from starterkit.core.models.report import ToolResponse
from starterkit.core.models.step import Operation
from starterkit.core.observability.token_metrics import TokenTracker
from starterkit.core.operations import OPERATIONS
from starterkit.core.persistence.lock import target_lock
from starterkit.core.services.system_checks import SystemReport, check_system_requirements
from starterkit.core.validation import validate

logger = logging.getLogger(__name__)

SystemCheck = Callable[[Settings], SystemReport]


class Router:
    """Dispatches named operations against a project directory.

    Args:
        registry: Adapter registry used for every action (default: shell + filesystem).
        settings: Runtime settings (default: built-in defaults).
        observer: Optional TokenTracker recording every dispatch.
        system_check: Callable returning a SystemReport, for operations
            that check the toolchain first.
        lock_dir: Directory for advisory lock files (default: temp dir).
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        settings: Settings | None = None,
        observer: TokenTracker | None = None,
        system_check: SystemCheck | None = None,
        lock_dir: Path | None = None,
        operations: Mapping[str, Operation] | None = None,
    ):
        self.registry = registry or AdapterRegistry.default()
        self.settings = settings or Settings()
        self.observer = observer
        self._system_check = system_check or check_system_requirements
        self._lock_dir = lock_dir
        self._operations = dict(operations if operations is not None else OPERATIONS)

    # ── Catalog ─────────────────────────────────────────────────

    def list_operations(self) -> list[dict[str, Any]]:
        return [
            {"name": op.name, "description": op.description, "inputSchema": op.input_schema()}
            for op in self._operations.values()
        ]

    def get(self, name: str) -> Operation:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperationError(name)
        return operation

    # ── Dispatch ────────────────────────────────────────────────

    def dispatch(self, name: str, params: Mapping[str, Any] | None = None) -> ToolResponse:
        """Run one operation and wrap the outcome. Never raises."""
        start = time.monotonic()
        logger.info("Dispatching %s", name)

        raw = {} if params is None else params
        try:
            if not isinstance(raw, Mapping):
                raise RequestValidationError([f"arguments must be an object, got {type(raw).__name__}"])
            response = ToolResponse(content=self._run(name, raw))
        except RequestValidationError as e:
            if isinstance(e, UnknownOperationError):
                response = ToolResponse(content=f"Error: {e}", is_error=True)
            else:
                response = ToolResponse(content=f"❌ Validation failed: {', '.join(e.errors)}", is_error=True)
        except StarterkitError as e:
            logger.error("%s failed: %s", name, e)
            response = ToolResponse(content=f"Error: {e}", is_error=True)
        except Exception as e:
            logger.exception("Unexpected error in %s", name)
            response = ToolResponse(content=f"Error: {e}", is_error=True)

        if self.observer is not None:
            self.observer.track(
                name,
                json.dumps(dict(raw) if isinstance(raw, Mapping) else raw, default=str),
                response.content,
                elapsed_ms=(time.monotonic() - start) * 1000,
                files=_files_mentioned(response.content),
            )
        return response

    def _run(self, name: str, raw: Mapping[str, Any]) -> str:
        operation = self.get(name)

        result = validate(operation, raw)
        if not result.valid:
            raise RequestValidationError(result.errors)
        for warning in result.warnings:
            logger.warning(warning)

        params = result.params
        project_path = getattr(params, "project_path", None)
        root = Path(project_path) if project_path else Path.cwd()

        system = None
        if operation.checks_system:
            system = self._system_check(self.settings)
            if not system.valid:
                raise PreconditionError("❌ System requirements not met:\n" + "\n".join(system.errors))

        context = RunContext(
            project_root=root,
            registry=self.registry,
            settings=self.settings,
            system=system,
            observer=self.observer,
        )

        if not project_path:
            report = run_operation(operation, params, context)
            return operation.summarize(params, report, context)

        with target_lock(root, operation=operation.name, lock_dir=self._lock_dir):
            report = run_operation(operation, params, context)
            return operation.summarize(params, report, context)


def _files_mentioned(text: str) -> int:
    """Rough count of generated files, for the observer."""
    return max(1, text.count(".ts") + text.count(".json") + text.count(".md"))
