"""
analyze_token_usage — report on the session's token observer.

Reads the TokenTracker supplied with the run context and, optionally,
sizes the bundled template modules. The report is returned as text and,
when a project path is given, saved next to the project.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.report import RunReport
from starterkit.core.models.step import Operation, Step
from starterkit.core.observability.token_metrics import TokenTracker, estimate_tokens
from starterkit.core.operations.common import OperationParams, step, write

REPORT_FILE = "token-analytics-report.md"
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_LARGE_TEMPLATE_TOKENS = 5000
_LOW_TEMPLATE_EFFICIENCY = 2.0
_MIN_REPORTED_SAVINGS = 100
_TOOL_TOKEN_LIMIT = 15_000
_SESSION_TOKEN_LIMIT = 100_000
_EFFICIENCY_TARGET = 3.0


class AnalyticsParams(OperationParams):
    project_path: str | None = Field(
        None, alias="projectPath", description="Project directory to save the report in (optional)"
    )
    analyze_templates: bool = Field(
        True, alias="analyzeTemplates", description="Analyze template sizes (default: true)"
    )
    generate_report: bool = Field(
        True, alias="generateReport", description=f"Save the report as {REPORT_FILE} (default: true)"
    )
    optimize_templates: bool = Field(
        False, alias="optimizeTemplates", description="Estimate savings from compressing templates (default: false)"
    )


@dataclass
class TemplateSize:
    file: str
    size: int
    tokens: int

    @property
    def efficiency(self) -> float:
        return self.size / self.tokens if self.tokens else 0.0


def compress_template(text: str) -> str:
    """Strip line comments, runs of blank lines and trailing whitespace."""
    text = re.sub(r"^\s*#(?!!).*$", "", text, flags=re.MULTILINE)
    text = re.sub(r"\n\s*\n\s*\n", "\n\n", text)
    text = re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)
    return text.strip()


def template_sizes(directory: Path = TEMPLATES_DIR) -> list[TemplateSize]:
    sizes = []
    for path in sorted(directory.glob("*.py")):
        content = path.read_text(encoding="utf-8")
        sizes.append(TemplateSize(path.name, len(content), estimate_tokens(content)))
    return sorted(sizes, key=lambda t: t.tokens, reverse=True)


def _template_section(directory: Path) -> list[str]:
    if not directory.is_dir():
        return [f"Templates directory not found: {directory}", ""]
    sizes = template_sizes(directory)
    lines = [
        "### Template Files Analysis",
        "",
        "| File | Size (KB) | Est. Tokens | Efficiency |",
        "|------|-----------|-------------|------------|",
    ]
    lines += [f"| {t.file} | {t.size / 1024:.1f} | {t.tokens:,} | {t.efficiency:.1f} |" for t in sizes]
    total_size = sum(t.size for t in sizes)
    total_tokens = sum(t.tokens for t in sizes)
    lines += ["", f"**Total Template Size**: {total_size / 1024:.1f} KB (~{total_tokens:,} tokens)", ""]

    large = [t for t in sizes if t.tokens > _LARGE_TEMPLATE_TOKENS]
    if large:
        lines += ["### 🚨 Large Templates (>5K tokens)", ""]
        lines += [f"- **{t.file}**: {t.tokens:,} tokens" for t in large]
        lines += ["", "💡 **Recommendation**: Consider splitting large templates into smaller, focused modules.", ""]

    inefficient = [t for t in sizes if t.efficiency < _LOW_TEMPLATE_EFFICIENCY]
    if inefficient:
        lines += ["### ⚡ Low Efficiency Templates (<2.0 chars/token)", ""]
        lines += [f"- **{t.file}**: {t.efficiency:.2f} chars/token" for t in inefficient]
        lines += ["", "💡 **Recommendation**: Remove redundant whitespace and comments from these templates.", ""]
    return lines


def _optimization_section(directory: Path) -> list[str]:
    lines = ["## 🔧 Template Optimization Actions", ""]
    for path in sorted(directory.glob("*.py")):
        original = path.read_text(encoding="utf-8")
        before = estimate_tokens(original)
        after = estimate_tokens(compress_template(original))
        savings = before - after
        if savings > _MIN_REPORTED_SAVINGS:
            lines += [
                f"### {path.name}",
                f"- **Original**: {before:,} tokens",
                f"- **Compressed**: {after:,} tokens",
                f"- **Savings**: {savings:,} tokens ({savings / before * 100:.1f}%)",
                "",
            ]
    return lines


def build_report(params: AnalyticsParams, tracker: TokenTracker, templates: Path = TEMPLATES_DIR) -> str:
    summary = tracker.session_summary()
    lines = [
        "# 📊 Token Usage Analysis Report",
        "",
        "## 🎯 Current Session Summary",
        "",
        f"- **Total Tokens Used**: {summary['total_tokens']:,}",
        f"- **Tools Executed**: {summary['total_tools']}",
        f"- **Average per Tool**: {round(summary['average_tokens_per_tool']):,} tokens",
        f"- **Most Expensive Tool**: {summary['most_expensive_tool']}",
        f"- **Token Efficiency**: {summary['token_efficiency']:.2f} chars/token",
        "",
    ]
    if params.analyze_templates:
        lines += ["## 🔍 Template Analysis", ""] + _template_section(templates)

    lines += ["## 🎯 Optimization Recommendations", ""]
    lines += [f"- {rec}" for rec in tracker.recommendations()]
    lines += [
        "",
        "## 💰 Token Budget Guidelines",
        "",
        "### Recommended Limits:",
        f"- **Per-tool limit**: {_TOOL_TOKEN_LIMIT:,} tokens (current: {round(summary['average_tokens_per_tool'])})",
        f"- **Session limit**: {_SESSION_TOKEN_LIMIT:,} tokens (current: {summary['total_tokens']:,})",
        f"- **Template efficiency target**: >{_EFFICIENCY_TARGET} chars/token "
        f"(current: {summary['token_efficiency']:.2f})",
        "",
    ]

    breakdown = tracker.tool_breakdown()
    if breakdown:
        lines += ["## 🛠️ Tool-Specific Metrics", ""]
        for tool, stats in breakdown.items():
            usages = tracker.usages(tool)
            efficiency = sum(u.efficiency for u in usages) / len(usages)
            lines += [
                f"### {tool}",
                f"- **Average Tokens**: {stats['average_tokens']:,}",
                f"- **Executions**: {stats['uses']}",
                f"- **Efficiency**: {efficiency:.2f} chars/token",
                f"- **Files Generated**: {stats['files']}",
                "",
            ]

    if params.optimize_templates and templates.is_dir():
        lines += _optimization_section(templates)
    return "\n".join(lines)


def _tracker(ctx: RunContext) -> TokenTracker:
    return ctx.observer if ctx.observer is not None else TokenTracker()


def _plan_analytics(params: AnalyticsParams, ctx: RunContext) -> list[Step]:
    if not (params.project_path and params.generate_report):
        return []
    return [
        step(
            "Saving token analytics report...",
            write(REPORT_FILE, build_report(params, _tracker(ctx))),
            fatal=False,
        )
    ]


def _summarize_analytics(params: AnalyticsParams, report: RunReport, ctx: RunContext) -> str:
    text = build_report(params, _tracker(ctx))
    if report.completed:
        text += f"\n\n📁 **Report saved to**: {ctx.project_root / REPORT_FILE}\n"
    for warning in report.warnings:
        text += f"\n\n⚠️ **Could not save report**: {warning.detail}\n"
    return text


TOKEN_ANALYTICS = Operation(
    name="analyze_token_usage",
    description="Analyzes token usage of this session and suggests template optimizations",
    params_model=AnalyticsParams,
    plan=_plan_analytics,
    summarize=_summarize_analytics,
    requires_project=False,
)
