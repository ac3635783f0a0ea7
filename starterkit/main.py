"""
Next.js starterkit — CLI entrypoint.

Usage:
    starterkit --help
    starterkit serve
    starterkit tools
    starterkit run create_nextjs_base --param projectPath=./my-app
    starterkit detect ./my-app
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml

from starterkit import __version__
from starterkit.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="starterkit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to starterkit.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Next.js starterkit — scaffold a SaaS starter one capability at a time."""
    from starterkit.core.config.loader import ConfigError, load_settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(level=resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    try:
        ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _router(ctx: click.Context, **kwargs: Any):
    from starterkit.core.router import Router

    return Router(settings=ctx.obj["settings"], **kwargs)


def _parse_params(pairs: tuple[str, ...], json_params: str | None) -> dict[str, Any]:
    """Build the request from ``--json-params`` and ``--param key=value`` pairs.

    Values are parsed as YAML scalars (``true``, ``3``, ``[en, es]``);
    dotted keys (``features.payments=false``) build nested objects.
    """
    params: dict[str, Any] = {}
    if json_params:
        try:
            loaded = json.loads(json_params)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"invalid JSON: {e}", param_hint="--json-params") from e
        if not isinstance(loaded, dict):
            raise click.BadParameter("must be a JSON object", param_hint="--json-params")
        params.update(loaded)

    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected key=value, got {pair!r}", param_hint="--param")
        try:
            value = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            value = raw
        target = params
        *parents, leaf = key.split(".")
        for part in parents:
            target = target.setdefault(part, {})
            if not isinstance(target, dict):
                raise click.BadParameter(f"{part!r} already holds a value, cannot set {key!r}", param_hint="--param")
        target[leaf] = value
    return params


# ── Commands ────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def serve(ctx: click.Context) -> None:
    """Serve every operation as an MCP tool over stdio."""
    from starterkit.core.observability.token_metrics import TokenTracker
    from starterkit.ui.mcp.server import MCPServer

    MCPServer(_router(ctx, observer=TokenTracker())).serve()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def tools(ctx: click.Context, as_json: bool) -> None:
    """List available operations and their parameters."""
    operations = _router(ctx).list_operations()

    if as_json:
        click.echo(json.dumps(operations, indent=2))
        return

    click.secho(f"\n🧰 Operations: {len(operations)}", fg="cyan", bold=True)
    for op in operations:
        click.secho(f"\n   {op['name']}", fg="white", bold=True)
        click.echo(f"     {op['description']}")
        if ctx.obj.get("verbose"):
            required = set(op["inputSchema"].get("required", []))
            for name, prop in op["inputSchema"].get("properties", {}).items():
                marker = "*" if name in required else " "
                click.echo(f"     {marker} {name}: {prop.get('description', '')}")
    click.echo()


@cli.command()
@click.argument("operation")
@click.option("--param", "-p", "pairs", multiple=True, help="Parameter as key=value (repeatable).")
@click.option("--json-params", default=None, help="Parameters as a JSON object.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    operation: str,
    pairs: tuple[str, ...],
    json_params: str | None,
    as_json: bool,
) -> None:
    """Run one operation.

    Examples:

        starterkit run create_nextjs_base -p projectPath=./my-app

        starterkit run setup_drizzle_orm -p projectPath=./my-app -p provider=sqlite

        starterkit run create_nextjs_app --json-params '{"projectPath": "./app", "features": {"payments": false}}'
    """
    params = _parse_params(pairs, json_params)
    response = _router(ctx).dispatch(operation, params)

    if as_json:
        click.echo(json.dumps(response.to_mcp(), indent=2, ensure_ascii=False))
    elif response.is_error:
        click.secho(response.content, fg="red")
    else:
        click.echo(response.content)

    if response.is_error:
        sys.exit(1)


@cli.command()
@click.argument("path", type=click.Path(file_okay=False), default=".")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def detect(path: str, as_json: bool) -> None:
    """Show which capabilities are present in PATH."""
    from starterkit.core.models.state import Capability
    from starterkit.core.services.detection import detect_project_state, missing_capabilities, suggest_operations

    state = detect_project_state(path)

    if as_json:
        click.echo(json.dumps(state.to_dict(), indent=2))
        return

    click.secho(f"\n🔍 Detection: {Path(path).resolve()}", fg="cyan", bold=True)
    for capability in Capability:
        if state.has(capability):
            click.secho(f"   ✓ {capability.label}", fg="green")
        else:
            click.secho(f"   ✗ {capability.label}", fg="red")

    missing = missing_capabilities(state, list(Capability))
    if missing:
        click.echo()
        click.secho("   💡 Next operations:", fg="yellow")
        for name in suggest_operations(missing):
            click.echo(f"     • {name}")
    click.echo()


# ── Register sub-command groups from starterkit/ui/cli/ ─────────

from starterkit.ui.cli.selftest import selftest  # noqa: E402

cli.add_command(selftest)


if __name__ == "__main__":
    cli()
