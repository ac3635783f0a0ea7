"""
Capability and ProjectState models — what a target directory already has.

Capabilities are a closed set. ProjectState is a fixed-shape, read-only
snapshot with one boolean per capability, derived fresh from the
filesystem every time it is needed and never mutated afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Capability(str, Enum):
    """A feature or integration whose presence is tracked in a project."""

    NEXTJS = "nextjs"
    SHADCN = "shadcn"
    BIOME = "biome"
    VSCODE_CONFIG = "vscode_config"
    DRIZZLE = "drizzle"
    ENVIRONMENT_VARS = "environment_vars"
    AUTHENTICATION = "authentication"
    PROTECTED_ROUTES = "protected_routes"
    STRIPE = "stripe"
    STRIPE_WEBHOOKS = "stripe_webhooks"
    TEAM_MANAGEMENT = "team_management"
    FORM_HANDLING = "form_handling"
    VALIDATION = "validation"
    REACT_QUERY = "react_query"
    TESTING = "testing"
    GIT_WORKFLOW = "git_workflow"
    INTERNATIONALIZATION = "internationalization"
    GIT_REPOSITORY = "git_repository"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[Capability, str] = {
    Capability.NEXTJS: "Next.js framework",
    Capability.SHADCN: "shadcn/ui components",
    Capability.BIOME: "Biome linting",
    Capability.VSCODE_CONFIG: "VSCode configuration",
    Capability.DRIZZLE: "Drizzle ORM",
    Capability.ENVIRONMENT_VARS: "Environment variables",
    Capability.AUTHENTICATION: "JWT authentication",
    Capability.PROTECTED_ROUTES: "Protected routes",
    Capability.STRIPE: "Stripe payments",
    Capability.STRIPE_WEBHOOKS: "Stripe webhooks",
    Capability.TEAM_MANAGEMENT: "Team management",
    Capability.FORM_HANDLING: "Form handling",
    Capability.VALIDATION: "Zod validation",
    Capability.REACT_QUERY: "React Query",
    Capability.TESTING: "Testing suite",
    Capability.GIT_WORKFLOW: "Git workflow",
    Capability.INTERNATIONALIZATION: "Internationalization",
    Capability.GIT_REPOSITORY: "Git repository",
}


class DetectionRule(BaseModel):
    """How to detect a capability in a directory.

    A capability is present when any non-empty clause holds:
    - dependencies_all: every package is declared in the manifest
    - files_any_of: at least one path exists
    - files_all_of: every path exists
    """

    dependencies_all: list[str] = Field(default_factory=list)
    files_any_of: list[str] = Field(default_factory=list)
    files_all_of: list[str] = Field(default_factory=list)


class ProjectState(BaseModel):
    """Point-in-time snapshot of the capabilities present in a target."""

    model_config = ConfigDict(frozen=True)

    nextjs: bool = False
    shadcn: bool = False
    biome: bool = False
    vscode_config: bool = False
    drizzle: bool = False
    environment_vars: bool = False
    authentication: bool = False
    protected_routes: bool = False
    stripe: bool = False
    stripe_webhooks: bool = False
    team_management: bool = False
    form_handling: bool = False
    validation: bool = False
    react_query: bool = False
    testing: bool = False
    git_workflow: bool = False
    internationalization: bool = False
    git_repository: bool = False

    def has(self, capability: Capability) -> bool:
        return getattr(self, capability.value)

    @property
    def present(self) -> list[Capability]:
        """Capabilities detected, in declaration order."""
        return [c for c in Capability if self.has(c)]

    def to_dict(self) -> dict[str, bool]:
        return {c.value: self.has(c) for c in Capability}
