"""
Team management: multi-tenant teams, roles and activity logs.
"""

from __future__ import annotations

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.auth import AUTH_MISSING
from starterkit.core.operations.common import (
    NEXTJS_MISSING,
    ProjectParams,
    bullet,
    step,
    success_message,
    write,
)
from starterkit.core.templates import teams as tpl


class TeamParams(ProjectParams):
    include_roles: bool = Field(True, alias="includeRoles", description="Include role-based permissions (default: true)")
    include_activity_logs: bool = Field(
        True, alias="includeActivityLogs", description="Include team activity logging (default: true)"
    )
    require_auth: bool = Field(
        True, alias="requireAuth", description="Require authentication to be set up first (default: true)"
    )
    require_database: bool = Field(
        True, alias="requireDatabase", description="Require Drizzle ORM to be set up first (default: true)"
    )


def _plan_teams(params: TeamParams, ctx: RunContext) -> list[Step]:
    models = [write("models/team.ts", tpl.TEAM_MODEL)]
    if params.include_activity_logs:
        models.append(write("models/activity-log.ts", tpl.ACTIVITY_LOG_MODEL))

    steps = [
        step("Creating team data models...", models),
        step("Creating team queries...", write("lib/db/team-queries.ts", tpl.TEAM_QUERIES)),
        step(
            "Creating team server actions and validation...",
            write("validations/team.ts", tpl.TEAM_VALIDATIONS),
            write("actions/team.ts", tpl.TEAM_ACTIONS),
        ),
    ]
    if params.include_roles:
        steps.append(step("Creating role-based permissions...", write("lib/auth/permissions.ts", tpl.PERMISSIONS)))
    steps.append(
        step(
            "Creating team components...",
            write("components/team/team-switcher.tsx", tpl.TEAM_SWITCHER),
            write("components/team/member-list.tsx", tpl.MEMBER_LIST),
            write("components/team/team-form.tsx", tpl.TEAM_FORM),
            write("components/team/index.ts", tpl.COMPONENTS_INDEX),
        )
    )
    return steps


def _summarize_teams(params: TeamParams, report: RunReport, ctx: RunContext) -> str:
    features = ["Team and membership models", "Team queries and server actions", "Team switcher, member list and form"]
    if params.include_roles:
        features.append("Role-based permissions (owner, admin, member)")
    if params.include_activity_logs:
        features.append("Activity logging")
    return success_message(
        "Team management setup completed successfully!",
        report,
        "👥 **Includes:**\n" + bullet(features),
        ["Export the team models from `lib/db/schema.ts`", "Run `pnpm db:generate` and `pnpm db:migrate`"],
    )


TEAM_MANAGEMENT = Operation(
    name="setup_team_management",
    description="Sets up multi-tenant team management with roles and permissions",
    params_model=TeamParams,
    plan=_plan_teams,
    summarize=_summarize_teams,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.TEAM_MANAGEMENT, "Team management is already set up in this project."),
        requires(Capability.AUTHENTICATION, AUTH_MISSING, flag="require_auth"),
        requires(
            Capability.DRIZZLE,
            "Database not found. Run 'setup_drizzle_orm' first, or pass requireDatabase=false.",
            flag="require_database",
        ),
    ),
)
