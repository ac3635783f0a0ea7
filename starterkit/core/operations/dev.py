"""
Developer experience operations: forms, testing and git workflow.
"""

from __future__ import annotations

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.action import Action
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.common import (
    MANIFEST,
    NEXTJS_MISSING,
    ProjectParams,
    add_scripts,
    bullet,
    lacks,
    merge_json,
    step,
    success_message,
    write,
    write_json,
    write_many,
)
from starterkit.core.services.packages import install_actions
from starterkit.core.templates import forms as forms_tpl
from starterkit.core.templates import git as git_tpl
from starterkit.core.templates import testing as test_tpl


# ── setup_form_handling ─────────────────────────────────────────


class FormParams(ProjectParams):
    include_zod_validation: bool = Field(
        True, alias="includeZodValidation", description="Include Zod schema validation (default: true)"
    )
    include_react_query: bool = Field(
        True, alias="includeReactQuery", description="Include React Query for server state (default: true)"
    )


def form_files(zod: bool, react_query: bool) -> list[Action]:
    """Form library and component files shared with create_nextjs_app."""
    files = [
        write("lib/forms/hooks.ts", forms_tpl.HOOKS if zod else forms_tpl.HOOKS_PLAIN),
        write("lib/forms/types.ts", forms_tpl.TYPES),
        write("lib/forms/utils.ts", forms_tpl.UTILS),
    ]
    if react_query:
        files += [
            write("lib/forms/query-hooks.ts", forms_tpl.QUERY_HOOKS),
            write("lib/forms/query-provider.tsx", forms_tpl.QUERY_PROVIDER),
        ]
    files.append(write("lib/forms/index.ts", forms_tpl.lib_index(react_query)))
    if zod:
        files.append(write("validations/forms.ts", forms_tpl.SCHEMAS))
    files += write_many(forms_tpl.FIELD_COMPONENTS, prefix="components/forms/")
    files.append(write("components/forms/index.ts", forms_tpl.COMPONENTS_INDEX))
    return files


def _plan_forms(params: FormParams, ctx: RunContext) -> list[Step]:
    pm = ctx.package_manager
    steps = [step("Installing React Hook Form...", install_actions("forms", pm))]
    if params.include_zod_validation:
        steps.append(
            step(
                "Installing Zod...",
                install_actions("zod", pm),
                when=lacks(Capability.VALIDATION),
                skip="(zod already installed)",
            )
        )
    if params.include_react_query:
        steps.append(
            step(
                "Installing React Query...",
                install_actions("react_query", pm),
                when=lacks(Capability.REACT_QUERY),
                skip="(@tanstack/react-query already installed)",
            )
        )
    steps.append(
        step(
            "Creating form hooks, utilities and components...",
            form_files(params.include_zod_validation, params.include_react_query),
        )
    )
    return steps


def _summarize_forms(params: FormParams, report: RunReport, ctx: RunContext) -> str:
    features = ["React Hook Form hooks (lib/forms)", "Reusable field components (components/forms)"]
    if params.include_zod_validation:
        features.append("Zod schemas with `useZodForm`")
    if params.include_react_query:
        features.append("React Query provider and mutation hooks")
    return success_message(
        "Form handling setup completed successfully!",
        report,
        "📝 **Includes:**\n" + bullet(features),
        ["Wrap the root layout in `QueryProvider`" if params.include_react_query else "Import hooks from `@/lib/forms`"],
    )


FORM_HANDLING = Operation(
    name="setup_form_handling",
    description="Sets up React Hook Form with Zod validation and React Query",
    params_model=FormParams,
    plan=_plan_forms,
    summarize=_summarize_forms,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.FORM_HANDLING, "Form handling is already set up in this project."),
    ),
)


# ── setup_testing_suite ─────────────────────────────────────────


class TestingParams(ProjectParams):
    include_unit_tests: bool = Field(True, alias="includeUnitTests", description="Include Vitest unit tests (default: true)")
    include_e2e_tests: bool = Field(True, alias="includeE2ETests", description="Include Playwright E2E tests (default: true)")
    include_mocking: bool = Field(True, alias="includeMocking", description="Include MSW API mocking (default: true)")


def unit_test_files(mocking: bool) -> list[Action]:
    files = [
        write("vitest.config.ts", test_tpl.VITEST_CONFIG),
        write("src/test-setup.ts", test_tpl.TEST_SETUP_WITH_MSW if mocking else test_tpl.TEST_SETUP),
        write("__tests__/test-utils.tsx", test_tpl.TEST_UTILS),
        write("__tests__/components/button.test.tsx", test_tpl.BUTTON_TEST),
    ]
    if mocking:
        files += [
            write("src/mocks/handlers.ts", test_tpl.MSW_HANDLERS),
            write("src/mocks/setup.ts", test_tpl.MSW_SETUP),
        ]
    return files


def e2e_test_files() -> list[Action]:
    return [
        write("playwright.config.ts", test_tpl.PLAYWRIGHT_CONFIG),
        write("e2e/homepage.spec.ts", test_tpl.HOMEPAGE_SPEC),
    ]


def _plan_testing(params: TestingParams, ctx: RunContext) -> list[Step]:
    pm = ctx.package_manager
    steps = []
    if params.include_unit_tests:
        steps.append(step("Installing Vitest and Testing Library...", install_actions("unit_testing", pm)))
    if params.include_e2e_tests:
        steps.append(step("Installing Playwright...", install_actions("e2e_testing", pm)))
    if params.include_mocking:
        steps.append(step("Installing MSW...", install_actions("mocking", pm)))

    if params.include_unit_tests:
        steps.append(
            step(
                "Creating Vitest configuration and example tests...",
                unit_test_files(params.include_mocking),
                add_scripts(test_tpl.UNIT_SCRIPTS),
            )
        )
    if params.include_e2e_tests:
        steps += [
            step("Creating Playwright configuration...", e2e_test_files(), add_scripts(test_tpl.E2E_SCRIPTS)),
            step(
                "Installing Playwright browsers...",
                Action.command("npx playwright install --with-deps chromium"),
                fatal=False,
            ),
        ]
    return steps


def _summarize_testing(params: TestingParams, report: RunReport, ctx: RunContext) -> str:
    scripts = []
    if params.include_unit_tests:
        scripts += list(test_tpl.UNIT_SCRIPTS)
    if params.include_e2e_tests:
        scripts += list(test_tpl.E2E_SCRIPTS)
    return success_message(
        "Testing suite setup completed successfully!",
        report,
        "🧪 **Available Scripts:**\n" + bullet(f"`pnpm {name}`" for name in scripts),
        ["Run `pnpm test` to execute the example test"],
    )


TESTING_SUITE = Operation(
    name="setup_testing_suite",
    description="Sets up Vitest, Playwright and MSW testing infrastructure",
    params_model=TestingParams,
    plan=_plan_testing,
    summarize=_summarize_testing,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.TESTING, "Testing suite is already set up in this project."),
    ),
)


# ── setup_git_workflow ──────────────────────────────────────────


class GitParams(ProjectParams):
    include_hooks: bool = Field(True, alias="includeHooks", description="Include Lefthook git hooks (default: true)")
    include_commit_standards: bool = Field(
        True, alias="includeCommitStandards", description="Include commitlint and commitizen (default: true)"
    )
    include_lint_staged: bool = Field(True, alias="includeLintStaged", description="Include lint-staged (default: true)")


def commit_standard_files() -> list[Action]:
    return [
        write("commitlint.config.js", git_tpl.COMMITLINT),
        write_json(".czrc", git_tpl.CZRC),
        write(".gitmessage", git_tpl.GITMESSAGE),
        merge_json(MANIFEST, {"config": git_tpl.COMMITIZEN_CONFIG}),
    ]


def _plan_git(params: GitParams, ctx: RunContext) -> list[Step]:
    steps = [
        step(
            "Initializing git repository...",
            Action.command("git init"),
            when=lacks(Capability.GIT_REPOSITORY),
            skip="(git repository already exists)",
        ),
        step("Installing git workflow tools...", install_actions("git", ctx.package_manager)),
    ]
    if params.include_hooks:
        steps.append(step("Creating Lefthook configuration...", write("lefthook.yml", git_tpl.LEFTHOOK)))
    if params.include_lint_staged:
        steps.append(step("Configuring lint-staged...", merge_json(MANIFEST, {"lint-staged": git_tpl.LINT_STAGED})))
    if params.include_commit_standards:
        steps.append(step("Setting up commit standards...", commit_standard_files(), add_scripts({"commit": "cz"})))
    if params.include_hooks:
        steps.append(
            step("Installing git hooks...", Action.command("npx lefthook install"), fatal=False)
        )
    if params.include_commit_standards:
        steps.append(
            step("Setting commit message template...", Action.command("git config commit.template .gitmessage"), fatal=False)
        )
    return steps


def _summarize_git(params: GitParams, report: RunReport, ctx: RunContext) -> str:
    features = []
    if params.include_hooks:
        features.append("Lefthook pre-commit and commit-msg hooks")
    if params.include_lint_staged:
        features.append("lint-staged with Biome")
    if params.include_commit_standards:
        features.append("Conventional commits (commitlint + commitizen)")
    return success_message(
        "Git workflow setup completed successfully!",
        report,
        "🔧 **Includes:**\n" + bullet(features) if features else "",
        ["Commit with `pnpm commit` for guided conventional messages"],
    )


GIT_WORKFLOW = Operation(
    name="setup_git_workflow",
    description="Sets up Git hooks with Lefthook and commit standards",
    params_model=GitParams,
    plan=_plan_git,
    summarize=_summarize_git,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.GIT_WORKFLOW, "Git workflow is already set up in this project."),
    ),
)
