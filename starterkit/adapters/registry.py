"""
Adapter registry — routes each Action to the adapter named in it.

``execute_action`` is the only way the step runner causes a side effect.
Whatever happens inside the adapter (unknown name, failed pre-flight,
an adapter that raises despite its contract) comes back as a Receipt,
so a step only ever has to inspect ``receipt.ok``.
"""

from __future__ import annotations

import logging
import time

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name → adapter table plus the dispatch entry point."""

    def __init__(self, adapters: list[Adapter] | None = None):
        self._adapters: dict[str, Adapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    @classmethod
    def default(cls) -> AdapterRegistry:
        """The production wiring: real shell commands and real files."""
        from starterkit.adapters.shell.command import ShellCommandAdapter
        from starterkit.adapters.shell.filesystem import FilesystemAdapter

        return cls([ShellCommandAdapter(), FilesystemAdapter()])

    def register(self, adapter: Adapter) -> None:
        """Add ``adapter``; a later registration under the same name wins."""
        if adapter.name in self._adapters:
            logger.debug("Replacing adapter %s with %r", adapter.name, adapter)
        self._adapters[adapter.name] = adapter

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return list(self._adapters)

    def execute_action(self, action: Action, project_root: str = ".", timeout: int = 300) -> Receipt:
        """Run one Action against ``project_root``. Never raises.

        A ``timeout`` param on the action overrides the registry-wide
        default passed in here.
        """
        started = time.monotonic()
        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return self._fail(action, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(
            action=action,
            project_root=project_root,
            timeout=action.params.get("timeout", timeout),
            params=action.params,
        )

        try:
            ok, reason = adapter.validate(context)
        except Exception as e:
            return self._fail(action, f"Validation error: {e}")
        if not ok:
            return self._fail(action, f"Validation failed: {reason}")

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised on %s: %s", action.adapter, action.id, e)
            receipt = self._fail(action, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt

    @staticmethod
    def _fail(action: Action, error: str) -> Receipt:
        return Receipt.failure(adapter=action.adapter, action_id=action.id, error=error)
