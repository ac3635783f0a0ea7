"""
Detection service — derive a ProjectState from a target directory.

Looks at the package manifest and a handful of marker files and decides
which capabilities are already present. Every operation re-runs this
before acting, so nothing here is cached.

Pure logic — never writes, never raises for a missing or unreadable
project. A directory that does not exist has no capabilities.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from starterkit.core.models.state import Capability, DetectionRule, ProjectState

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"


def _rule(deps: Iterable[str] = (), any_of: Iterable[str] = (), all_of: Iterable[str] = ()) -> DetectionRule:
    return DetectionRule(
        dependencies_all=list(deps),
        files_any_of=list(any_of),
        files_all_of=list(all_of),
    )


CAPABILITY_RULES: dict[Capability, DetectionRule] = {
    Capability.NEXTJS: _rule(["next"], ["next.config.ts", "next.config.js", "next.config.mjs"]),
    Capability.SHADCN: _rule(any_of=["components.json"]),
    Capability.BIOME: _rule(["@biomejs/biome"], ["biome.json"]),
    Capability.VSCODE_CONFIG: _rule(any_of=[".vscode/settings.json"]),
    Capability.DRIZZLE: _rule(["drizzle-orm"], ["drizzle.config.ts"]),
    Capability.ENVIRONMENT_VARS: _rule(any_of=[".env.example"]),
    Capability.AUTHENTICATION: _rule(["jose", "bcryptjs"], ["lib/auth/session.ts"]),
    Capability.PROTECTED_ROUTES: _rule(any_of=["middleware.ts"]),
    Capability.STRIPE: _rule(["stripe"], ["lib/payments/stripe.ts"]),
    Capability.STRIPE_WEBHOOKS: _rule(any_of=["app/api/webhooks/stripe/route.ts"]),
    Capability.TEAM_MANAGEMENT: _rule(
        any_of=["models/team.ts"],
        all_of=["actions/team.ts", "lib/db/team-queries.ts"],
    ),
    Capability.FORM_HANDLING: _rule(["react-hook-form"], ["lib/forms/hooks.ts"]),
    Capability.VALIDATION: _rule(["zod"]),
    Capability.REACT_QUERY: _rule(["@tanstack/react-query"]),
    Capability.TESTING: _rule(
        ["vitest", "@playwright/test"],
        all_of=["vitest.config.ts", "playwright.config.ts"],
    ),
    Capability.GIT_WORKFLOW: _rule(["lefthook"], ["lefthook.yml"]),
    Capability.INTERNATIONALIZATION: _rule(["next-intl"], ["i18n.ts"]),
    Capability.GIT_REPOSITORY: _rule(any_of=[".git"]),
}

# Operation that installs each capability
CAPABILITY_OPERATIONS: dict[Capability, str] = {
    Capability.NEXTJS: "create_nextjs_base",
    Capability.SHADCN: "create_nextjs_base",
    Capability.BIOME: "setup_biome_linting",
    Capability.VSCODE_CONFIG: "setup_vscode_config",
    Capability.DRIZZLE: "setup_drizzle_orm",
    Capability.ENVIRONMENT_VARS: "setup_environment_vars",
    Capability.AUTHENTICATION: "setup_authentication_jwt",
    Capability.PROTECTED_ROUTES: "setup_protected_routes",
    Capability.STRIPE: "setup_stripe_payments",
    Capability.STRIPE_WEBHOOKS: "setup_stripe_webhooks",
    Capability.TEAM_MANAGEMENT: "setup_team_management",
    Capability.FORM_HANDLING: "setup_form_handling",
    Capability.VALIDATION: "setup_form_handling",
    Capability.REACT_QUERY: "setup_form_handling",
    Capability.TESTING: "setup_testing_suite",
    Capability.GIT_WORKFLOW: "setup_git_workflow",
    Capability.INTERNATIONALIZATION: "setup_internationalization",
    Capability.GIT_REPOSITORY: "setup_git_workflow",
}


def read_manifest_dependencies(directory: Path) -> set[str]:
    """Names declared in dependencies and devDependencies of package.json.

    A missing or unparseable manifest yields an empty set.
    """
    manifest = directory / MANIFEST_FILE
    if not manifest.is_file():
        return set()
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable manifest %s: %s", manifest, e)
        return set()
    if not isinstance(data, dict):
        return set()

    names: set[str] = set()
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            names.update(section)
    return names


def rule_matches(directory: Path, rule: DetectionRule, dependencies: set[str]) -> bool:
    """True when any non-empty clause of the rule is satisfied."""
    if rule.dependencies_all and all(d in dependencies for d in rule.dependencies_all):
        return True
    if rule.files_any_of and any((directory / f).exists() for f in rule.files_any_of):
        return True
    if rule.files_all_of and all((directory / f).exists() for f in rule.files_all_of):
        return True
    return False


def detect_project_state(path: str | Path) -> ProjectState:
    """Snapshot the capabilities present in ``path``."""
    directory = Path(path)
    if not directory.is_dir():
        logger.debug("Detection target %s is not a directory", directory)
        return ProjectState()

    dependencies = read_manifest_dependencies(directory)
    flags = {
        capability.value: rule_matches(directory, rule, dependencies)
        for capability, rule in CAPABILITY_RULES.items()
    }
    state = ProjectState(**flags)
    logger.debug(
        "Detected %d capabilities in %s: %s",
        len(state.present),
        directory,
        ", ".join(c.value for c in state.present) or "none",
    )
    return state


def missing_capabilities(state: ProjectState, required: Iterable[Capability]) -> list[Capability]:
    return [c for c in required if not state.has(c)]


def suggest_operations(missing: Iterable[Capability]) -> list[str]:
    """Operations that would install the missing capabilities, deduplicated in order."""
    seen: list[str] = []
    for capability in missing:
        op = CAPABILITY_OPERATIONS.get(capability)
        if op and op not in seen:
            seen.append(op)
    return seen
