"""
Token metrics — estimate and summarize the text volume of tool calls.

No external dependencies. A TokenTracker is an ordinary instance owned
by whoever serves requests (one per server session); there is no
process-global state. The estimate is a character heuristic, not a
real tokenizer.
"""

from __future__ import annotations

import builtins
import math
import time
from dataclasses import dataclass, field
from typing import Any

CHARS_PER_TOKEN = 3.5

# Thresholds for recommendations
_SESSION_TOKEN_WARN = 50_000
_TOOL_AVG_TOKEN_WARN = 10_000
_SESSION_EFFICIENCY_WARN = 2.0
_TOOL_EFFICIENCY_WARN = 1.5
_EXCELLENT_EFFICIENCY = 3.0


def estimate_tokens(text: str) -> int:
    """Approximate token count: ceil(chars / 3.5)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


@dataclass
class Histogram:
    """Running record of observed values: count, total, mean and max."""

    name: str
    _values: list[float] = field(default_factory=list)

    def observe(self, value: float) -> None:
        self._values.append(value)

    @property
    def count(self) -> int:
        return len(self._values)

    @property
    def total(self) -> float:
        return sum(self._values)

    @property
    def mean(self) -> float:
        if not self._values:
            return 0.0
        return self.total / self.count

    @property
    def max(self) -> float:
        return builtins.max(self._values) if self._values else 0.0


@dataclass
class ToolUsage:
    """One tracked tool invocation."""

    tool: str
    input_tokens: int
    output_tokens: int
    response_size: int
    elapsed_ms: float
    files: int
    timestamp: float = field(default_factory=time.time)

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def efficiency(self) -> float:
        """Response characters per token."""
        return self.response_size / self.total_tokens if self.total_tokens else 0.0


class TokenTracker:
    """Per-session record of tool text volume."""

    def __init__(self) -> None:
        self._usages: list[ToolUsage] = []
        self._tokens: dict[str, Histogram] = {}
        self._latency: dict[str, Histogram] = {}

    def track(
        self,
        tool: str,
        input_text: str,
        output_text: str,
        elapsed_ms: float = 0.0,
        files: int = 1,
    ) -> ToolUsage:
        usage = ToolUsage(
            tool=tool,
            input_tokens=estimate_tokens(input_text),
            output_tokens=estimate_tokens(output_text),
            response_size=len(output_text),
            elapsed_ms=elapsed_ms,
            files=files,
        )
        self._usages.append(usage)
        self._tokens.setdefault(tool, Histogram(f"{tool}.tokens")).observe(usage.total_tokens)
        self._latency.setdefault(tool, Histogram(f"{tool}.elapsed_ms")).observe(elapsed_ms)
        return usage

    def usages(self, tool: str | None = None) -> list[ToolUsage]:
        if tool is None:
            return list(self._usages)
        return [u for u in self._usages if u.tool == tool]

    def session_summary(self) -> dict[str, Any]:
        total_tokens = sum(u.total_tokens for u in self._usages)
        total_tools = len(self._usages)

        most_expensive = "none"
        if self._tokens:
            name, hist = builtins.max(self._tokens.items(), key=lambda kv: kv[1].total)
            if hist.total > 0:
                most_expensive = name

        return {
            "total_tokens": total_tokens,
            "total_tools": total_tools,
            "average_tokens_per_tool": total_tokens / total_tools if total_tools else 0.0,
            "most_expensive_tool": most_expensive,
            "token_efficiency": (
                sum(u.response_size for u in self._usages) / total_tokens if total_tokens else 0.0
            ),
        }

    def recommendations(self) -> list[str]:
        recs: list[str] = []
        summary = self.session_summary()

        if summary["total_tokens"] > _SESSION_TOKEN_WARN:
            recs.append("⚠️ HIGH TOKEN USAGE: Consider breaking large operations into smaller tools")
        if summary["total_tools"] and summary["token_efficiency"] < _SESSION_EFFICIENCY_WARN:
            recs.append(
                "🔧 LOW EFFICIENCY: Templates may be too verbose - "
                "consider using smaller, focused templates"
            )

        for tool, hist in self._tokens.items():
            if hist.mean > _TOOL_AVG_TOKEN_WARN:
                recs.append(
                    f"📊 {tool}: High token usage ({round(hist.mean)} avg) - consider splitting functionality"
                )
            usages = self.usages(tool)
            avg_eff = sum(u.efficiency for u in usages) / len(usages)
            if avg_eff < _TOOL_EFFICIENCY_WARN:
                recs.append(f"⚡ {tool}: Low efficiency ({avg_eff:.2f} chars/token) - optimize templates")

        if not recs:
            recs.append("✅ Token usage is within reasonable limits")
            if summary["token_efficiency"] > _EXCELLENT_EFFICIENCY:
                recs.append("🎯 Excellent token efficiency!")
        return recs

    def tool_breakdown(self) -> dict[str, dict[str, Any]]:
        return {
            tool: {
                "uses": hist.count,
                "total_tokens": int(hist.total),
                "average_tokens": round(hist.mean),
                "average_ms": round(self._latency[tool].mean, 1),
                "files": sum(u.files for u in self.usages(tool)),
            }
            for tool, hist in self._tokens.items()
        }

    def reset(self) -> None:
        self._usages.clear()
        self._tokens.clear()
        self._latency.clear()
