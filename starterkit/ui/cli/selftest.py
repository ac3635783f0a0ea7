"""
CLI commands for the offline scenario runner.

Thin wrappers over ``starterkit.core.testing.runner``.
"""

from __future__ import annotations

import json
import sys

import click


def _runner(ctx: click.Context, base_dir: str | None):
    from starterkit.core.router import Router
    from starterkit.core.testing.runner import ScenarioRunner

    settings = ctx.obj["settings"]
    return ScenarioRunner(base_dir=base_dir or settings.test_projects_dir, router=Router(settings=settings))


@click.group("selftest")
def selftest() -> None:
    """Selftest — build sample projects end to end and verify them."""


@selftest.command("run")
@click.option("--dir", "base_dir", default=None, help="Where to build projects (default: settings).")
@click.option("--only", "only", multiple=True, help="Run only scenarios whose name contains this text.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, base_dir: str | None, only: tuple[str, ...], as_json: bool) -> None:
    """Run every scenario against the real toolchain."""
    runner = _runner(ctx, base_dir)
    if only:
        needles = [o.lower() for o in only]
        runner.scenarios = [s for s in runner.scenarios if any(n in s.name.lower() for n in needles)]
        if not runner.scenarios:
            click.secho(f"❌ No scenario matches: {', '.join(only)}", fg="red")
            sys.exit(1)

    if not as_json:
        click.secho(f"🧪 Running {len(runner.scenarios)} scenarios in {runner.base_dir}", fg="cyan", bold=True)

    runner.run_all()
    summary = runner.summary()

    if as_json:
        click.echo(json.dumps(summary, indent=2))
    else:
        click.echo()
        for result in runner.results:
            if result.success:
                click.secho(f"   ✅ {result.name} ({result.duration:.2f}s)", fg="green")
            else:
                click.secho(f"   ❌ {result.name} ({result.duration:.2f}s)", fg="red")
                for error in result.errors:
                    click.echo(f"      • {error[:200]}")
        click.echo()
        click.secho(
            f"   Passed: {summary['passed']}/{summary['total']}  in {summary['duration_s']}s",
            fg="green" if not summary["failed"] else "yellow",
            bold=True,
        )
        click.echo(f"   Projects kept in {runner.base_dir} (remove with: starterkit selftest cleanup)")

    if summary["failed"]:
        sys.exit(1)


@selftest.command("cleanup")
@click.option("--dir", "base_dir", default=None, help="Projects directory (default: settings).")
@click.pass_context
def cleanup(ctx: click.Context, base_dir: str | None) -> None:
    """Remove the directory of generated scenario projects."""
    runner = _runner(ctx, base_dir)
    if runner.cleanup():
        click.secho(f"✅ Removed {runner.base_dir}", fg="green")
    else:
        click.echo(f"Nothing to remove at {runner.base_dir}")
