"""
Action and Receipt — what a step asks for and what it got back.

A step is a list of Actions. Each Action names the adapter that can
perform it (``shell`` or ``filesystem``) and carries that adapter's
parameters. The adapter answers with a Receipt; failures travel in the
Receipt, not as exceptions.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Action(BaseModel):
    id: str
    adapter: str
    params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def command(cls, command: str, **params: Any) -> Action:
        """``shell`` action running ``command`` in the project directory."""
        return cls(id=f"shell:{command}", adapter="shell", params={"command": command, **params})

    @classmethod
    def file(cls, operation: str, path: str, **params: Any) -> Action:
        """``filesystem`` action; ``operation`` is write, merge_json, append, ..."""
        return cls(
            id=f"filesystem:{operation}:{path}",
            adapter="filesystem",
            params={"operation": operation, "path": path, **params},
        )


class Receipt(BaseModel):
    adapter: str
    action_id: str
    status: Literal["ok", "failed"] = "ok"
    duration_ms: int = 0
    output: str = ""
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)
