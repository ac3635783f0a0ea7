"""
create_nextjs_app — the all-in-one SaaS scaffold.

Runs the same building blocks as the individual capability operations,
but as one fixed sequence: every dependency group is installed first,
then configuration and source files are written group by group. Feature
flags drop whole groups; ``core`` cannot be turned off because every
other group builds on the framework.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field, model_validator

from starterkit.core.engine.executor import RunContext
from starterkit.core.errors import PreconditionError
from starterkit.core.models.action import Action
from starterkit.core.models.report import RunReport
from starterkit.core.models.step import Operation, Step
from starterkit.core.operations import i18n as i18n_ops
from starterkit.core.operations.common import (
    MANIFEST,
    ProjectParams,
    add_scripts,
    append_lines,
    bullet,
    marker,
    merge_json,
    step,
    success_message,
    write,
    write_json,
)
from starterkit.core.operations.core import biome_config, create_app_step, folder_structure_step, vscode_actions
from starterkit.core.operations.dev import commit_standard_files, e2e_test_files, form_files, unit_test_files
from starterkit.core.services.packages import SHADCN_ADD_ALL, SHADCN_INIT, install_actions
from starterkit.core.services.system_checks import SystemReport, check_system_requirements
from starterkit.core.templates import auth as auth_tpl
from starterkit.core.templates import config as config_tpl
from starterkit.core.templates import git as git_tpl
from starterkit.core.templates import i18n as i18n_tpl
from starterkit.core.templates import payments as pay_tpl
from starterkit.core.templates import saas as saas_tpl
from starterkit.core.templates import structure
from starterkit.core.templates import teams as team_tpl

logger = logging.getLogger(__name__)


class AppFeatures(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    core: bool = Field(True, description="Next.js, Biome, VSCode settings and shadcn/ui")
    database: bool = Field(True, description="Drizzle ORM with PostgreSQL and environment files")
    authentication: bool = Field(True, description="JWT authentication and route protection")
    payments: bool = Field(True, description="Stripe payments")
    team_management: bool = Field(True, alias="teamManagement", description="Multi-tenant teams")
    dev_experience: bool = Field(
        True, alias="devExperience", description="Env validation, forms, testing and git hooks"
    )
    internationalization: bool = Field(True, description="next-intl with six languages")


class AppParams(ProjectParams):
    features: AppFeatures = Field(default_factory=AppFeatures, description="Feature groups to include")

    @model_validator(mode="after")
    def _core_required(self) -> AppParams:
        if not self.features.core:
            raise ValueError("features.core cannot be disabled; every other feature builds on it")
        return self


def _system(ctx: RunContext) -> SystemReport:
    system = ctx.system or check_system_requirements(ctx.settings)
    if not system.valid:
        raise PreconditionError("❌ System requirements not met:\n" + "\n".join(system.errors))
    logger.debug(
        "System check passed - Git: %s, Node: %s, %s: %s",
        system.git.version, system.node.version, system.package_manager.name, system.package_manager.version,
    )
    return system


# ── Group builders ──────────────────────────────────────────────


def _saas_lib(features: AppFeatures) -> list[Action]:
    actions: list[Action] = []
    if features.authentication:
        actions += [
            write("lib/auth/session.ts", auth_tpl.SESSION),
            write("lib/auth/password.ts", auth_tpl.PASSWORD),
            write("lib/auth/middleware.ts", auth_tpl.AUTH_HELPERS),
            write("validations/auth.ts", auth_tpl.VALIDATIONS),
            write("actions/auth.ts", auth_tpl.ACTIONS),
            write("components/auth/login-form.tsx", auth_tpl.LOGIN_FORM),
            write("components/auth/signup-form.tsx", auth_tpl.SIGNUP_FORM),
            write("components/auth/index.ts", auth_tpl.COMPONENTS_INDEX),
            write("app/auth/login/page.tsx", auth_tpl.LOGIN_PAGE),
            write("app/auth/signup/page.tsx", auth_tpl.SIGNUP_PAGE),
            write("app/dashboard/layout.tsx", auth_tpl.DASHBOARD_LAYOUT),
            write("app/dashboard/page.tsx", auth_tpl.DASHBOARD_PAGE),
        ]
        if features.database:
            actions += [
                write("models/user.ts", auth_tpl.USER_MODEL),
                write("lib/db/user-queries.ts", auth_tpl.USER_QUERIES),
                write("lib/db/seed.ts", saas_tpl.DB_SEED),
            ]
    if features.payments:
        actions += [
            write("lib/payments/stripe.ts", pay_tpl.STRIPE_CLIENT),
            write("lib/payments/utils.ts", pay_tpl.PAYMENT_UTILS),
            write("lib/payments/webhook-handlers.ts", pay_tpl.WEBHOOK_HANDLERS),
            write("lib/payments/webhook-utils.ts", pay_tpl.WEBHOOK_UTILS),
            write("app/api/webhooks/stripe/route.ts", pay_tpl.WEBHOOK_ROUTE),
            write("models/subscription.ts", pay_tpl.SUBSCRIPTION_MODEL),
            write("actions/payments.ts", pay_tpl.CHECKOUT_ACTIONS),
            write("types/payments.ts", pay_tpl.PAYMENT_TYPES),
        ]
        if features.database:
            actions += [
                write("lib/db/subscription-queries.ts", pay_tpl.SUBSCRIPTION_QUERIES),
                write("lib/db/setup.ts", saas_tpl.DB_SETUP),
            ]
    if features.team_management:
        actions += [
            write("models/team.ts", team_tpl.TEAM_MODEL),
            write("models/activity-log.ts", team_tpl.ACTIVITY_LOG_MODEL),
            write("lib/db/team-queries.ts", team_tpl.TEAM_QUERIES),
            write("validations/team.ts", team_tpl.TEAM_VALIDATIONS),
            write("actions/team.ts", team_tpl.TEAM_ACTIONS),
            write("lib/auth/permissions.ts", team_tpl.PERMISSIONS),
        ]
    if features.database:
        actions.append(add_scripts(structure.DATABASE_SCRIPTS))
    return actions


def _git_hooks(system: SystemReport, min_version: str) -> Step:
    found = system.git.version or "unknown"
    return step(
        "Setting up Git hooks and development workflow...",
        write("lefthook.yml", git_tpl.LEFTHOOK),
        commit_standard_files(),
        when=lambda _state: system.git_ok,
        skip=f"Git hooks require Git {min_version}+, found {found}",
    )


# ── Plan ────────────────────────────────────────────────────────


def _plan_app(params: AppParams, ctx: RunContext) -> list[Step]:
    system = _system(ctx)
    f = params.features
    pm = ctx.package_manager
    saas = f.authentication or f.payments or f.team_management
    languages = list(i18n_tpl.DEFAULT_LANGUAGES)

    steps = [
        create_app_step(),
        step("Installing Biome...", install_actions("biome", pm)),
        step("Initializing Biome configuration...", Action.command(f"{pm} exec biome init")),
        step(
            "Setting up Biome configuration with custom GritQL rules...",
            write_json("biome.json", biome_config(strict=True)),
            write(".gritqlrc.yaml", config_tpl.GRITQL_RULES),
        ),
        step("Creating VSCode settings...", vscode_actions(optimize_for_biome=True)),
        step("Setting up shadcn/ui...", Action.command(SHADCN_INIT)),
        step("Adding all shadcn components...", Action.command(SHADCN_ADD_ALL)),
        step("Updating package.json scripts...", add_scripts({**structure.CORE_SCRIPTS, **config_tpl.BIOME_SCRIPTS})),
        folder_structure_step("Creating enhanced folder structure...", enhanced=True),
    ]

    # Dependencies
    if f.database:
        steps.append(step("Installing Drizzle ORM dependencies...", install_actions("drizzle", pm)))
    if saas:
        steps.append(step("Installing SaaS dependencies...", install_actions("saas", pm)))
    if f.dev_experience:
        steps.append(step("Installing dev experience dependencies...", install_actions("dev_experience", pm)))
    if f.internationalization:
        steps.append(step("Installing internationalization dependencies...", install_actions("i18n", pm)))
    if f.dev_experience:
        steps += [
            step("Installing testing dependencies...", install_actions("testing", pm)),
            step("Installing git hooks and commit tools...", install_actions("git", pm)),
        ]

    # Configuration
    if f.database:
        steps += [
            step(
                "Creating Drizzle configuration...",
                write("drizzle.config.ts", config_tpl.drizzle_config("postgresql")),
                write("lib/db/index.ts", config_tpl.db_client("postgresql")),
                write("lib/db/migrate.ts", config_tpl.DB_MIGRATE),
                write("lib/db/schema.ts", config_tpl.DB_SCHEMA, if_missing=True),
                write("models/index.ts", config_tpl.MODELS_INDEX, if_missing=True),
                marker("lib/db/migrations"),
                add_scripts(config_tpl.DRIZZLE_SCRIPTS),
            ),
            step(
                "Creating environment files...",
                write(".env.example", config_tpl.env_template(True, f.authentication, f.payments)),
                write(".env.local", config_tpl.env_template(True, f.authentication, f.payments), if_missing=True),
                append_lines(".gitignore", config_tpl.GITIGNORE_ENV_LINES),
            ),
        ]

    # SaaS features
    if f.authentication:
        steps.append(step("Creating SaaS middleware...", write("middleware.ts", saas_tpl.SAAS_MIDDLEWARE)))
    if saas:
        steps.append(step("Creating SaaS lib structure...", _saas_lib(f)))

    # Developer experience
    if f.dev_experience:
        steps += [
            step("Setting up environment validation with T3 Env...", write("lib/env.ts", config_tpl.ENV_VALIDATION)),
            step("Setting up React Hook Form...", form_files(zod=True, react_query=True)),
            step("Setting up Vitest and Playwright testing...", unit_test_files(mocking=True), e2e_test_files()),
            _git_hooks(system, ctx.settings.min_git_version),
            step(
                "Updating package.json scripts and config...",
                add_scripts(git_tpl.DEV_EXPERIENCE_SCRIPTS),
                merge_json(MANIFEST, {"config": git_tpl.COMMITIZEN_CONFIG, "lint-staged": git_tpl.LINT_STAGED}),
            ),
        ]

    # Internationalization
    if f.internationalization:
        middleware = i18n_tpl.saas_middleware(languages) if f.authentication else i18n_tpl.middleware(languages)
        steps += [
            step("Setting up internationalization configuration...", i18n_ops.config_actions(languages)),
            step("Creating locales and translation files...", i18n_ops.locale_actions(languages)),
            step("Setting up internationalized routing structure...", i18n_ops.routing_actions()),
            step("Updating middleware for internationalization...", write("middleware.ts", middleware)),
        ]
        if f.authentication:
            steps.append(i18n_ops.auth_form_step())
        steps.append(
            step("Updating Next.js config and creating i18n documentation...", i18n_ops.next_config_actions(languages))
        )

    # Drizzle generation needs a real database URL, so the user runs it
    steps.append(step("Running final setup validation..."))
    return steps


# ── Summary ─────────────────────────────────────────────────────


def _summarize_app(params: AppParams, report: RunReport, ctx: RunContext) -> str:
    f = params.features
    sections = [
        "🚀 **Your SaaS application includes:**",
        "**🏗️ Core Framework:**\n" + bullet([
            "Next.js with App Router & TypeScript",
            "Tailwind CSS for styling",
            "Biome for linting/formatting + custom GritQL rules",
            "shadcn/ui components library",
            "Enhanced project structure (libs, models, validations)",
        ]),
    ]
    if f.internationalization:
        sections.append("**🌐 Internationalization:**\n" + bullet([
            "next-intl with " + ", ".join(code.upper() for code in i18n_tpl.DEFAULT_LANGUAGES),
            "Dynamic [locale] routing and a language switcher",
        ]))
    if f.authentication or f.team_management:
        auth = []
        if f.authentication:
            auth += ["JWT authentication with bcrypt password hashing", "Protected routes middleware"]
        if f.team_management:
            auth.append("Team/user management with roles")
        sections.append("**🔒 Authentication & Security:**\n" + bullet(auth))
    if f.payments or f.database:
        data = []
        if f.payments:
            data.append("Stripe payments integration with webhooks")
        if f.database:
            data += ["Drizzle ORM with PostgreSQL", "Database migrations and seeding"]
        sections.append("**💳 Payments & Database:**\n" + bullet(data))
    if f.dev_experience:
        sections.append("**🛠️ Developer Experience:**\n" + bullet([
            "Type-safe environment variables (T3 Env)",
            "React Hook Form with Zod and React Query",
            "Vitest + Playwright + MSW",
            "Git hooks with Lefthook and lint-staged",
            "Commit message standards (Commitlint + Commitizen)",
        ]))

    git_ok = ctx.system.git_ok if ctx.system else True
    if f.dev_experience and not git_ok:
        sections.append(
            f"⚠️  **Git Hooks Skipped**: Upgrade to Git {ctx.settings.min_git_version}+ and run `pnpm prepare`"
        )
    elif f.dev_experience:
        sections.append("🔗 **Git Hooks**: Run `pnpm prepare` for automated code quality")

    next_steps = ["Run `pnpm build` to check for TypeScript errors", "Run `pnpm lint` to validate formatting"]
    if f.database:
        next_steps = [
            "Fill in real values in `.env.local` (database URL, AUTH_SECRET, Stripe keys)",
            *next_steps,
            "Run `pnpm db:generate` to create migrations",
        ]
        if f.payments:
            next_steps.append("Run `pnpm db:setup` to initialize Stripe products")
        if f.authentication:
            next_steps.append("Run `pnpm db:seed` to create test data")
    if f.dev_experience:
        next_steps.append("Install Playwright browsers: `pnpm exec playwright install`")
    if f.internationalization:
        next_steps.append("Visit `/es` or `/fr` to check the localized routes")

    return success_message(
        f"Next.js SaaS application created successfully at {ctx.project_root}!",
        report,
        "\n\n".join(sections),
        next_steps,
    )


NEXTJS_APP = Operation(
    name="create_nextjs_app",
    description=(
        "Creates a complete Next.js SaaS application in one run. Feature groups can be switched off "
        "individually; prefer the step-by-step tools for finer control."
    ),
    params_model=AppParams,
    plan=_plan_app,
    summarize=_summarize_app,
    warn_if_not_empty=True,
    checks_system=True,
)
