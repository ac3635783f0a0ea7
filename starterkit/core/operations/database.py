"""
Database operations: Drizzle ORM and environment variables.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.common import (
    NEXTJS_MISSING,
    ProjectParams,
    add_scripts,
    append_lines,
    bullet,
    marker,
    step,
    success_message,
    write,
)
from starterkit.core.services.packages import install_actions
from starterkit.core.templates import auth as auth_tpl
from starterkit.core.templates import config as tpl

_PROVIDER_GROUPS = {"postgresql": "drizzle", "mysql": "drizzle_mysql", "sqlite": "drizzle_sqlite"}


# ── setup_drizzle_orm ───────────────────────────────────────────


class DrizzleParams(ProjectParams):
    provider: Literal["postgresql", "mysql", "sqlite"] = Field(
        "postgresql", description="Database provider (default: postgresql)"
    )
    include_examples: bool = Field(True, alias="includeExamples", description="Include example schemas (default: true)")


def _plan_drizzle(params: DrizzleParams, ctx: RunContext) -> list[Step]:
    steps = [
        step(
            f"Installing Drizzle ORM with {params.provider} driver...",
            install_actions(_PROVIDER_GROUPS[params.provider], ctx.package_manager),
        ),
        step(
            "Creating Drizzle configuration...",
            write("drizzle.config.ts", tpl.drizzle_config(params.provider)),
            write("lib/db/index.ts", tpl.db_client(params.provider)),
            write("lib/db/migrate.ts", tpl.DB_MIGRATE),
            write("lib/db/schema.ts", tpl.DB_SCHEMA, if_missing=True),
            marker("lib/db/migrations"),
        ),
    ]
    if params.include_examples:
        steps.append(
            step(
                "Creating example models...",
                write("models/user.ts", auth_tpl.USER_MODEL, if_missing=True),
                write("models/index.ts", tpl.MODELS_INDEX, if_missing=True),
            )
        )
    steps.append(step("Adding database scripts to package.json...", add_scripts(tpl.DRIZZLE_SCRIPTS)))
    return steps


def _summarize_drizzle(params: DrizzleParams, report: RunReport, ctx: RunContext) -> str:
    return success_message(
        f"Drizzle ORM ({params.provider}) setup completed successfully!",
        report,
        "📋 **Available Scripts:**\n" + bullet(f"`pnpm {name}`" for name in tpl.DRIZZLE_SCRIPTS),
        [
            "Set the database URL in `.env.local`",
            "Run `pnpm db:generate` to create the first migration",
            "Run `pnpm db:migrate` to apply it",
        ],
    )


DRIZZLE_ORM = Operation(
    name="setup_drizzle_orm",
    description="Sets up Drizzle ORM with PostgreSQL/MySQL/SQLite",
    params_model=DrizzleParams,
    plan=_plan_drizzle,
    summarize=_summarize_drizzle,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.DRIZZLE, "Drizzle ORM is already set up in this project."),
    ),
)


# ── setup_environment_vars ──────────────────────────────────────


class EnvironmentParams(ProjectParams):
    include_t3_validation: bool = Field(
        True, alias="includeT3Validation", description="Include T3 Env validation (default: true)"
    )
    include_example_file: bool = Field(
        True, alias="includeExampleFile", description="Create .env.example file (default: true)"
    )


def _plan_environment(params: EnvironmentParams, ctx: RunContext) -> list[Step]:
    state = ctx.state()
    template = tpl.env_template(
        database=state.drizzle,
        auth=state.authentication,
        stripe=state.stripe,
    )

    steps = []
    if params.include_t3_validation:
        steps.append(step("Installing T3 Env for type-safe environment variables...", install_actions("env", ctx.package_manager)))

    files = [write(".env.local", template, if_missing=True)]
    if params.include_example_file:
        files.insert(0, write(".env.example", template))
    steps.append(step("Creating environment files...", files))

    if params.include_t3_validation:
        steps.append(step("Setting up T3 Env validation schema...", write("lib/env.ts", tpl.ENV_VALIDATION)))
    steps.append(
        step("Updating .gitignore for environment file protection...", append_lines(".gitignore", tpl.GITIGNORE_ENV_LINES))
    )
    return steps


def _summarize_environment(params: EnvironmentParams, report: RunReport, ctx: RunContext) -> str:
    files = [".env.local"]
    if params.include_example_file:
        files.insert(0, ".env.example")
    if params.include_t3_validation:
        files.append("lib/env.ts (T3 Env schema)")
    return success_message(
        "Environment variables setup completed successfully!",
        report,
        "📁 **Files:**\n" + bullet(files),
        ["Fill in real values in `.env.local`", "Never commit `.env.local`; it is listed in .gitignore"],
    )


ENVIRONMENT_VARS = Operation(
    name="setup_environment_vars",
    description="Creates environment variable files with T3 validation",
    params_model=EnvironmentParams,
    plan=_plan_environment,
    summarize=_summarize_environment,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(
            Capability.ENVIRONMENT_VARS,
            "Environment variables are already set up in this project. .env.example file already exists.",
        ),
    ),
)
