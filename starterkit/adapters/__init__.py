"""Adapters — bindings for external side effects (shell, filesystem).

Public re-exports for convenient access.
"""

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.adapters.mock import MockAdapter
from starterkit.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
