"""
Offline scenario runner — build real projects through the router.

Each scenario dispatches a sequence of operations into its own fresh
directory under the test-projects dir, then checks that the expected
files exist and the expected packages are declared in package.json.
Projects are left on disk for inspection until ``cleanup()``.
"""

from __future__ import annotations

import logging
import re
import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from starterkit.core.router import Router
from starterkit.core.services.detection import read_manifest_dependencies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scenario:
    name: str
    description: str
    tools: list[tuple[str, dict[str, Any]]]
    expected_files: list[str] = field(default_factory=list)
    expected_packages: list[str] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return re.sub(r"[^a-zA-Z0-9-]", "-", self.name).lower()


@dataclass
class ToolRun:
    tool: str
    success: bool
    duration: float
    error: str = ""


@dataclass
class ScenarioResult:
    name: str
    project_path: Path
    success: bool = False
    duration: float = 0.0
    errors: list[str] = field(default_factory=list)
    tools: list[ToolRun] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "project_path": str(self.project_path),
            "success": self.success,
            "duration_s": round(self.duration, 2),
            "errors": self.errors,
            "tools": [
                {"tool": t.tool, "success": t.success, "duration_s": round(t.duration, 2), "error": t.error}
                for t in self.tools
            ],
        }


SCENARIOS: list[Scenario] = [
    Scenario(
        name="Basic Next.js Setup",
        description="Core Next.js project creation with shadcn/ui",
        tools=[("create_nextjs_base", {"includeShadcn": True, "includeAllComponents": True})],
        expected_files=["package.json", "next.config.ts", "components.json", "lib/README.md"],
        expected_packages=["next"],
    ),
    Scenario(
        name="Core Tools Setup",
        description="Next.js + Biome + VSCode configuration",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_biome_linting", {"includeCustomRules": True}),
            ("setup_vscode_config", {"optimizeForBiome": True}),
        ],
        expected_files=["package.json", "biome.json", ".vscode/settings.json", ".vscode/extensions.json"],
        expected_packages=["next", "@biomejs/biome"],
    ),
    Scenario(
        name="Database Integration",
        description="Drizzle ORM with environment variables",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_drizzle_orm", {"provider": "postgresql"}),
            ("setup_environment_vars", {"includeT3Validation": True}),
        ],
        expected_files=["drizzle.config.ts", "lib/db/index.ts", "models/user.ts", ".env.example", "lib/env.ts"],
        expected_packages=["drizzle-orm", "drizzle-kit", "@t3-oss/env-nextjs"],
    ),
    Scenario(
        name="Authentication System",
        description="JWT authentication with protected routes",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_drizzle_orm", {"provider": "postgresql"}),
            ("setup_environment_vars", {}),
            ("setup_authentication_jwt", {"includePasswordHashing": True}),
            ("setup_protected_routes", {"protectionLevel": "advanced"}),
        ],
        expected_files=[
            "lib/auth/session.ts",
            "lib/auth/password.ts",
            "actions/auth.ts",
            "components/auth/login-form.tsx",
            "middleware.ts",
            "app/dashboard/layout.tsx",
        ],
        expected_packages=["jose", "bcryptjs", "zod"],
    ),
    Scenario(
        name="Stripe Payments",
        description="Stripe payments with webhooks",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_drizzle_orm", {}),
            ("setup_authentication_jwt", {}),
            ("setup_stripe_payments", {"includeSubscriptions": True}),
            ("setup_stripe_webhooks", {"includeCustomerPortal": True}),
        ],
        expected_files=[
            "lib/payments/stripe.ts",
            "lib/payments/utils.ts",
            "actions/payments.ts",
            "components/payments/checkout-button.tsx",
            "app/api/webhooks/stripe/route.ts",
            "lib/payments/webhook-handlers.ts",
        ],
        expected_packages=["stripe"],
    ),
    Scenario(
        name="Team Management System",
        description="Multi-tenant team management with roles",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_drizzle_orm", {}),
            ("setup_authentication_jwt", {}),
            ("setup_team_management", {"includeRoles": True, "includeActivityLogs": True}),
        ],
        expected_files=[
            "models/team.ts",
            "lib/db/team-queries.ts",
            "validations/team.ts",
            "actions/team.ts",
            "components/team/team-form.tsx",
            "components/team/member-list.tsx",
        ],
        expected_packages=["zod"],
    ),
    Scenario(
        name="Advanced Form Handling",
        description="React Hook Form with Zod validation and React Query",
        tools=[
            ("create_nextjs_base", {}),
            ("setup_form_handling", {"includeZodValidation": True, "includeReactQuery": True}),
        ],
        expected_files=[
            "lib/forms/hooks.ts",
            "lib/forms/utils.ts",
            "lib/forms/query-provider.tsx",
            "components/forms/form-input.tsx",
            "components/forms/form-field.tsx",
            "validations/forms.ts",
        ],
        expected_packages=["react-hook-form", "@hookform/resolvers", "zod", "@tanstack/react-query"],
    ),
    Scenario(
        name="Complete SaaS Application",
        description="Full SaaS setup with all major features",
        tools=[
            ("create_nextjs_base", {"includeShadcn": True}),
            ("setup_biome_linting", {}),
            ("setup_drizzle_orm", {"provider": "postgresql"}),
            ("setup_environment_vars", {}),
            ("setup_authentication_jwt", {}),
            ("setup_protected_routes", {}),
            ("setup_stripe_payments", {}),
            ("setup_stripe_webhooks", {}),
            ("setup_team_management", {}),
            ("setup_form_handling", {}),
        ],
        expected_files=[
            "package.json",
            "biome.json",
            "drizzle.config.ts",
            "middleware.ts",
            "lib/auth/session.ts",
            "lib/payments/stripe.ts",
            "models/team.ts",
            "lib/forms/hooks.ts",
        ],
        expected_packages=[
            "next", "@biomejs/biome", "drizzle-orm", "jose", "bcryptjs",
            "stripe", "react-hook-form", "zod", "@tanstack/react-query",
        ],
    ),
]


class ScenarioRunner:
    """Runs scenarios into ``base_dir`` (one subdirectory each)."""

    def __init__(
        self,
        base_dir: str | Path = "next_test_projects",
        router: Router | None = None,
        scenarios: list[Scenario] | None = None,
    ):
        self.base_dir = Path(base_dir).resolve()
        self.router = router or Router()
        self.scenarios = scenarios if scenarios is not None else SCENARIOS
        self.results: list[ScenarioResult] = []

    def run_all(self) -> list[ScenarioResult]:
        logger.info("Running %d scenarios in %s", len(self.scenarios), self.base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.results = [self.run(scenario) for scenario in self.scenarios]
        return self.results

    def run(self, scenario: Scenario) -> ScenarioResult:
        start = time.monotonic()
        project = self.base_dir / scenario.slug
        result = ScenarioResult(name=scenario.name, project_path=project)

        if project.exists():
            shutil.rmtree(project)
        project.mkdir(parents=True)

        for tool, config in scenario.tools:
            tool_start = time.monotonic()
            response = self.router.dispatch(tool, {"projectPath": str(project), **config})
            run = ToolRun(tool, not response.is_error, time.monotonic() - tool_start)
            if response.is_error:
                run.error = response.content
                result.errors.append(f"Tool {tool} failed: {response.content}")
            result.tools.append(run)

        for rel in scenario.expected_files:
            if not (project / rel).exists():
                result.errors.append(f"Expected file not found: {rel}")

        declared = read_manifest_dependencies(project)
        for package in scenario.expected_packages:
            if package not in declared:
                result.errors.append(f"Expected package not installed: {package}")

        result.success = not result.errors
        result.duration = time.monotonic() - start
        if result.success:
            logger.info("✅ %s - PASSED (%.2fs)", scenario.name, result.duration)
        else:
            logger.warning("❌ %s - FAILED (%.2fs)", scenario.name, result.duration)
        return result

    def summary(self) -> dict[str, Any]:
        passed = sum(1 for r in self.results if r.success)
        return {
            "total": len(self.results),
            "passed": passed,
            "failed": len(self.results) - passed,
            "duration_s": round(sum(r.duration for r in self.results), 2),
            "results": [r.to_dict() for r in self.results],
        }

    def cleanup(self) -> bool:
        """Remove the test-projects directory. Returns False if it did not exist."""
        if not self.base_dir.exists():
            return False
        shutil.rmtree(self.base_dir)
        logger.info("Removed %s", self.base_dir)
        return True
