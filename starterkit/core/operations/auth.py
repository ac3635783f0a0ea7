"""
Authentication operations: JWT sessions and protected routes.
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
    bullet,
    has,
    step,
    success_message,
    write,
)
from starterkit.core.services.packages import install_actions
from starterkit.core.templates import auth as tpl

AUTH_MISSING = "Authentication not found. Run 'setup_authentication_jwt' first."


# ── setup_authentication_jwt ────────────────────────────────────


class AuthParams(ProjectParams):
    include_password_hashing: bool = Field(
        True, alias="includePasswordHashing", description="Include bcrypt password hashing (default: true)"
    )
    include_user_management: bool = Field(
        True, alias="includeUserManagement", description="Include user CRUD operations (default: true)"
    )
    require_database: bool = Field(
        True, alias="requireDatabase", description="Require Drizzle ORM to be set up first (default: true)"
    )


def _plan_auth(params: AuthParams, ctx: RunContext) -> list[Step]:
    lib = [write("lib/auth/session.ts", tpl.SESSION), write("lib/auth/middleware.ts", tpl.AUTH_HELPERS)]
    if params.include_password_hashing:
        lib.append(write("lib/auth/password.ts", tpl.PASSWORD))

    steps = [
        step("Installing authentication packages...", install_actions("auth", ctx.package_manager)),
        step("Creating JWT session utilities...", lib),
        step(
            "Creating auth validation schemas and server actions...",
            write("validations/auth.ts", tpl.VALIDATIONS),
            write("actions/auth.ts", tpl.ACTIONS),
        ),
        step(
            "Creating login and signup components...",
            write("components/auth/login-form.tsx", tpl.LOGIN_FORM),
            write("components/auth/signup-form.tsx", tpl.SIGNUP_FORM),
            write("components/auth/index.ts", tpl.COMPONENTS_INDEX),
        ),
    ]
    if params.include_user_management:
        steps.append(
            step(
                "Creating user model and queries...",
                write("models/user.ts", tpl.USER_MODEL),
                write("lib/db/user-queries.ts", tpl.USER_QUERIES),
                when=has(Capability.DRIZZLE),
                skip="(Drizzle ORM not detected; user model and queries skipped)",
            )
        )
    return steps


def _summarize_auth(params: AuthParams, report: RunReport, ctx: RunContext) -> str:
    features = ["JWT sessions with jose (HTTP-only cookies)", "Login and signup forms with Zod validation"]
    if params.include_password_hashing:
        features.append("bcrypt password hashing")
    if params.include_user_management:
        features.append("User model and queries")
    return success_message(
        "JWT authentication setup completed successfully!",
        report,
        "🔒 **Includes:**\n" + bullet(features),
        [
            "Set `AUTH_SECRET` (32+ characters) in `.env.local`",
            "Protect pages with `setup_protected_routes`",
        ],
    )


AUTHENTICATION_JWT = Operation(
    name="setup_authentication_jwt",
    description="Sets up JWT authentication with bcrypt password hashing",
    params_model=AuthParams,
    plan=_plan_auth,
    summarize=_summarize_auth,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.AUTHENTICATION, "Authentication is already set up in this project."),
        requires(
            Capability.DRIZZLE,
            "Database not found. Run 'setup_drizzle_orm' first, or pass requireDatabase=false.",
            flag="require_database",
        ),
    ),
)


# ── setup_protected_routes ──────────────────────────────────────


class ProtectedRoutesParams(ProjectParams):
    protection_level: Literal["basic", "advanced"] = Field(
        "advanced", alias="protectionLevel", description="Protection level (default: advanced)"
    )
    require_auth: bool = Field(
        True, alias="requireAuth", description="Require authentication to be set up first (default: true)"
    )


def _plan_routes(params: ProtectedRoutesParams, ctx: RunContext) -> list[Step]:
    advanced = params.protection_level == "advanced"
    middleware = tpl.ROUTE_MIDDLEWARE_ADVANCED if advanced else tpl.ROUTE_MIDDLEWARE_BASIC
    steps = [step(f"Creating {params.protection_level} route protection middleware...", write("middleware.ts", middleware))]
    if advanced:
        steps.append(step("Creating route configuration...", write("lib/route-config.ts", tpl.ROUTE_CONFIG)))
    steps += [
        step(
            "Creating auth pages...",
            write("app/auth/login/page.tsx", tpl.LOGIN_PAGE),
            write("app/auth/signup/page.tsx", tpl.SIGNUP_PAGE),
            when=has(Capability.AUTHENTICATION),
            skip="(authentication components not found)",
        ),
        step(
            "Creating protected dashboard...",
            write("app/dashboard/layout.tsx", tpl.DASHBOARD_LAYOUT),
            write("app/dashboard/page.tsx", tpl.DASHBOARD_PAGE),
            when=has(Capability.AUTHENTICATION),
            skip="(authentication not found; dashboard needs session helpers)",
        ),
    ]
    return steps


def _summarize_routes(params: ProtectedRoutesParams, report: RunReport, ctx: RunContext) -> str:
    return success_message(
        "Protected routes setup completed successfully!",
        report,
        "🛡️ **Protection level:** " + params.protection_level,
        ["Add routes to `protectedRoutes` in `lib/route-config.ts`", "Visit `/dashboard` while signed out to verify"],
    )


PROTECTED_ROUTES = Operation(
    name="setup_protected_routes",
    description="Creates middleware for route protection",
    params_model=ProtectedRoutesParams,
    plan=_plan_routes,
    summarize=_summarize_routes,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.PROTECTED_ROUTES, "Route protection middleware already exists (middleware.ts)."),
        requires(Capability.AUTHENTICATION, AUTH_MISSING, flag="require_auth"),
    ),
)


