"""
Package groups — named dependency sets and the commands that add them.

The orchestrator never talks to the package manager directly: a group
is turned into shell Actions here and dispatched like any other step.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from starterkit.core.models.action import Action


@dataclass(frozen=True)
class PackageGroup:
    dependencies: tuple[str, ...] = ()
    dev_dependencies: tuple[str, ...] = ()


CREATE_NEXT_APP = "npx create-next-app@latest . --typescript --tailwind --app --use-pnpm --no-eslint --yes"
SHADCN_INIT = "npx shadcn@latest init --yes -b neutral"
SHADCN_ADD_ALL = "npx shadcn@latest add --all"

PACKAGE_GROUPS: dict[str, PackageGroup] = {
    "biome": PackageGroup(dev_dependencies=("@biomejs/biome",)),
    "drizzle": PackageGroup(
        dependencies=("drizzle-orm", "@neondatabase/serverless", "ws"),
        dev_dependencies=("drizzle-kit",),
    ),
    "drizzle_mysql": PackageGroup(dependencies=("drizzle-orm", "mysql2"), dev_dependencies=("drizzle-kit",)),
    "drizzle_sqlite": PackageGroup(
        dependencies=("drizzle-orm", "better-sqlite3"),
        dev_dependencies=("drizzle-kit", "@types/better-sqlite3"),
    ),
    "auth": PackageGroup(dependencies=("bcryptjs", "jose", "zod"), dev_dependencies=("@types/bcryptjs",)),
    "stripe": PackageGroup(dependencies=("stripe",)),
    "env": PackageGroup(dependencies=("@t3-oss/env-nextjs", "zod")),
    "forms": PackageGroup(dependencies=("react-hook-form", "@hookform/resolvers")),
    "zod": PackageGroup(dependencies=("zod",)),
    "react_query": PackageGroup(dependencies=("@tanstack/react-query",)),
    "i18n": PackageGroup(dependencies=("next-intl",)),
    "unit_testing": PackageGroup(
        dev_dependencies=(
            "vitest", "vite", "@vitejs/plugin-react",
            "@testing-library/react", "@testing-library/jest-dom",
            "@testing-library/user-event", "jsdom",
        ),
    ),
    "e2e_testing": PackageGroup(dev_dependencies=("@playwright/test",)),
    "mocking": PackageGroup(dev_dependencies=("msw",)),
    "saas": PackageGroup(
        dependencies=("stripe", "bcryptjs", "jose", "zod", "pg", "dotenv"),
        dev_dependencies=("@types/bcryptjs", "@types/pg"),
    ),
    "dev_experience": PackageGroup(
        dependencies=("@t3-oss/env-nextjs", "react-hook-form", "@hookform/resolvers", "@tanstack/react-query"),
    ),
    "testing": PackageGroup(
        dev_dependencies=(
            "vitest", "vite", "@vitejs/plugin-react",
            "@testing-library/react", "@testing-library/jest-dom",
            "@testing-library/user-event", "jsdom", "@playwright/test", "msw",
        ),
    ),
    "git": PackageGroup(
        dev_dependencies=(
            "lefthook", "lint-staged", "@commitlint/cli",
            "@commitlint/config-conventional", "commitizen",
            "cz-conventional-changelog",
        ),
    ),
}


def add_command(packages: list[str] | tuple[str, ...], dev: bool = False, package_manager: str = "pnpm") -> str:
    args = " ".join(shlex.quote(p) for p in packages)
    return f"{package_manager} add -D {args}" if dev else f"{package_manager} add {args}"


def install_actions(group: str, package_manager: str = "pnpm") -> list[Action]:
    """Shell actions that install one package group.

    Raises:
        KeyError: for an unknown group name.
    """
    pkgs = PACKAGE_GROUPS[group]
    actions: list[Action] = []
    if pkgs.dependencies:
        actions.append(Action.command(add_command(pkgs.dependencies, package_manager=package_manager)))
    if pkgs.dev_dependencies:
        actions.append(Action.command(add_command(pkgs.dev_dependencies, dev=True, package_manager=package_manager)))
    return actions
