"""
Operation catalog — every externally invocable operation, in listing order.
"""

from __future__ import annotations

from starterkit.core.models.step import Operation
from starterkit.core.operations.analytics import TOKEN_ANALYTICS
from starterkit.core.operations.app import NEXTJS_APP
from starterkit.core.operations.auth import AUTHENTICATION_JWT, PROTECTED_ROUTES
from starterkit.core.operations.core import BIOME_LINTING, NEXTJS_BASE, VSCODE_CONFIG
from starterkit.core.operations.database import DRIZZLE_ORM, ENVIRONMENT_VARS
from starterkit.core.operations.dev import FORM_HANDLING, GIT_WORKFLOW, TESTING_SUITE
from starterkit.core.operations.i18n import INTERNATIONALIZATION
from starterkit.core.operations.payments import STRIPE_PAYMENTS, STRIPE_WEBHOOKS
from starterkit.core.operations.teams import TEAM_MANAGEMENT
from starterkit.core.operations.wizard import PROJECT_WIZARD

OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        PROJECT_WIZARD,
        NEXTJS_APP,
        NEXTJS_BASE,
        BIOME_LINTING,
        VSCODE_CONFIG,
        DRIZZLE_ORM,
        ENVIRONMENT_VARS,
        AUTHENTICATION_JWT,
        PROTECTED_ROUTES,
        STRIPE_PAYMENTS,
        STRIPE_WEBHOOKS,
        TEAM_MANAGEMENT,
        FORM_HANDLING,
        TESTING_SUITE,
        GIT_WORKFLOW,
        INTERNATIONALIZATION,
        TOKEN_ANALYTICS,
    )
}


def get_operation(name: str) -> Operation | None:
    return OPERATIONS.get(name)


__all__ = ["OPERATIONS", "get_operation"]
