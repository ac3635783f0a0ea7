"""
Recording adapter for engine tests.

Registers under any name (usually ``shell``), succeeds by default, and
keeps every context it was handed so tests can assert on the exact
command sequence a plan produced.
"""

from __future__ import annotations

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.core.models.action import Receipt


class MockAdapter(Adapter):
    def __init__(self, adapter_name: str = "mock", available: bool = True, output: str = ""):
        self._name = adapter_name
        self._available = available
        self._output = output
        self._failures: dict[str, str] = {}
        self.calls: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def commands(self) -> list[str]:
        """Shell commands seen so far, in dispatch order."""
        return [c.action.params.get("command", "") for c in self.calls]

    def is_available(self) -> bool:
        return self._available

    def set_failure(self, action_id: str, error: str = "Mock failure") -> None:
        """Make the action with this id fail with ``error``."""
        self._failures[action_id] = error

    def execute(self, context: ExecutionContext) -> Receipt:
        self.calls.append(context)
        action_id = context.action.id
        if action_id in self._failures:
            return Receipt.failure(adapter=self._name, action_id=action_id, error=self._failures[action_id])
        return Receipt.success(adapter=self._name, action_id=action_id, output=self._output)

    def reset(self) -> None:
        self.calls.clear()
        self._failures.clear()
