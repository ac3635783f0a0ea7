"""
Core operations: the base Next.js app, Biome linting, VSCode settings.
"""

from __future__ import annotations

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.action import Action
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.common import (
    NEXTJS_MISSING,
    ProjectParams,
    add_scripts,
    bullet,
    marker,
    step,
    success_message,
    write,
    write_json,
)
from starterkit.core.services.packages import (
    CREATE_NEXT_APP,
    SHADCN_ADD_ALL,
    SHADCN_INIT,
    install_actions,
)
from starterkit.core.templates import config as tpl
from starterkit.core.templates import structure

# ── Shared step builders ────────────────────────────────────────


def create_app_step() -> Step:
    return step("Initializing Next.js app with pnpm...", Action.command(CREATE_NEXT_APP))


def folder_structure_step(description: str = "Creating folder structure...", enhanced: bool = False) -> Step:
    folders = structure.FOLDERS + (structure.ENHANCED_FOLDERS if enhanced else [])
    actions = [write(path, content, if_missing=True) for path, content in structure.FOLDER_READMES.items()]
    actions += [marker(folder) for folder in folders]
    if enhanced:
        actions.append(write("STRUCTURE.md", structure.STRUCTURE_GUIDE, if_missing=True))
    return step(description, actions)


def biome_config(strict: bool) -> dict:
    config = {**tpl.BIOME_CONFIG, "linter": {**tpl.BIOME_CONFIG["linter"]}}
    if strict:
        config["linter"]["rules"] = {**config["linter"]["rules"], **tpl.BIOME_STRICT_RULES}
    return config


def vscode_actions(optimize_for_biome: bool) -> list[Action]:
    settings = tpl.VSCODE_SETTINGS_BIOME if optimize_for_biome else tpl.VSCODE_SETTINGS_BASIC
    return [
        write_json(".vscode/settings.json", settings),
        write_json(".vscode/extensions.json", tpl.VSCODE_EXTENSIONS),
        write_json(".vscode/launch.json", tpl.VSCODE_LAUNCH),
    ]


# ── create_nextjs_base ──────────────────────────────────────────


class NextjsBaseParams(ProjectParams):
    include_shadcn: bool = Field(True, alias="includeShadcn", description="Include shadcn/ui components (default: true)")
    include_all_components: bool = Field(
        True, alias="includeAllComponents", description="Add all shadcn components (default: true)"
    )


def _plan_base(params: NextjsBaseParams, ctx: RunContext) -> list[Step]:
    steps = [create_app_step()]
    if params.include_shadcn:
        steps.append(step("Setting up shadcn/ui...", Action.command(SHADCN_INIT)))
        if params.include_all_components:
            steps.append(step("Adding all shadcn components...", Action.command(SHADCN_ADD_ALL)))
        else:
            basics = " ".join(structure.BASIC_COMPONENTS)
            steps.append(step("Adding basic shadcn components...", Action.command(f"npx shadcn@latest add {basics}")))
    steps.append(step("Updating package.json scripts...", add_scripts(structure.CORE_SCRIPTS)))
    steps.append(folder_structure_step("Creating basic folder structure..."))
    return steps


def _summarize_base(params: NextjsBaseParams, report: RunReport, ctx: RunContext) -> str:
    features = ["Next.js with App Router & TypeScript", "Tailwind CSS"]
    if params.include_shadcn:
        features.append("shadcn/ui (all components)" if params.include_all_components else "shadcn/ui (basic components)")
    return success_message(
        f"Next.js base project created successfully at {ctx.project_root}!",
        report,
        "🏗️ **Includes:**\n" + bullet(features),
        [
            "Run `pnpm dev` to start the development server",
            "Add linting with `setup_biome_linting`",
            "Add a database with `setup_drizzle_orm`",
        ],
    )


NEXTJS_BASE = Operation(
    name="create_nextjs_base",
    description=(
        "Creates basic Next.js application with TypeScript and Tailwind. Ask user if they want "
        "shadcn/ui components and whether to include all components or just basics."
    ),
    params_model=NextjsBaseParams,
    plan=_plan_base,
    summarize=_summarize_base,
    preconditions=(
        refuses(Capability.NEXTJS, "Next.js project already exists in this directory."),
    ),
    warn_if_not_empty=True,
)


# ── setup_biome_linting ─────────────────────────────────────────


class BiomeParams(ProjectParams):
    include_custom_rules: bool = Field(
        True, alias="includeCustomRules", description="Include GritQL custom rules (default: true)"
    )
    strict_mode: bool = Field(True, alias="strictMode", description="Enable strict linting mode (default: true)")


def _plan_biome(params: BiomeParams, ctx: RunContext) -> list[Step]:
    config_actions = [write_json("biome.json", biome_config(params.strict_mode))]
    if params.include_custom_rules:
        config_actions.append(write(".gritqlrc.yaml", tpl.GRITQL_RULES))
    return [
        step("Installing Biome linting package...", install_actions("biome", ctx.package_manager)),
        step("Initializing Biome configuration...", Action.command(f"{ctx.package_manager} exec biome init")),
        step(
            "Setting up Biome configuration with custom GritQL rules..."
            if params.include_custom_rules else "Setting up basic Biome configuration...",
            config_actions,
        ),
        step("Adding Biome scripts to package.json...", add_scripts(tpl.BIOME_SCRIPTS)),
    ]


def _summarize_biome(params: BiomeParams, report: RunReport, ctx: RunContext) -> str:
    return success_message(
        "Biome linting setup completed successfully!",
        report,
        "📋 **Available Scripts:**\n" + bullet(f"`pnpm {name}`" for name in tpl.BIOME_SCRIPTS),
        ["Run `pnpm lint` to check your code", "Set up VSCode integration with `setup_vscode_config`"],
    )


BIOME_LINTING = Operation(
    name="setup_biome_linting",
    description="Sets up Biome for linting and formatting with custom rules",
    params_model=BiomeParams,
    plan=_plan_biome,
    summarize=_summarize_biome,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.BIOME, "Biome is already set up in this project. Configuration files already exist."),
    ),
)


# ── setup_vscode_config ─────────────────────────────────────────


class VSCodeParams(ProjectParams):
    optimize_for_biome: bool = Field(
        True, alias="optimizeForBiome", description="Optimize for Biome linting (default: true)"
    )


def _plan_vscode(params: VSCodeParams, ctx: RunContext) -> list[Step]:
    return [step("Creating VSCode settings, extensions and launch configuration...", vscode_actions(params.optimize_for_biome))]


def _summarize_vscode(params: VSCodeParams, report: RunReport, ctx: RunContext) -> str:
    return success_message(
        "VSCode configuration created successfully!",
        report,
        "⚙️ **Files:**\n" + bullet([".vscode/settings.json", ".vscode/extensions.json", ".vscode/launch.json"]),
        ["Reload the VSCode window", "Install the recommended extensions when prompted"],
    )


VSCODE_CONFIG = Operation(
    name="setup_vscode_config",
    description="Creates VSCode settings optimized for the project",
    params_model=VSCodeParams,
    plan=_plan_vscode,
    summarize=_summarize_vscode,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.VSCODE_CONFIG, "VSCode configuration already exists (.vscode/settings.json)."),
    ),
)
