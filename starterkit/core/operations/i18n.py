"""
Internationalization with next-intl.

The builders below are shared with ``create_nextjs_app``, which runs the
same groups of writes as separate steps.
"""

from __future__ import annotations

import re

from pydantic import Field, field_validator

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.action import Action
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.common import (
    NEXTJS_MISSING,
    ProjectParams,
    bullet,
    has,
    lacks,
    step,
    success_message,
    write,
    write_json,
)
from starterkit.core.services.packages import install_actions
from starterkit.core.templates import i18n as tpl

GUIDE_FILE = "I18N.md"

# "en", "pt-br", "zh-hant-tw"; the code becomes a file name under locales/
LOCALE_CODE = re.compile(r"^[a-z]{2,3}(-[a-z0-9]{2,8})*$")


class I18nParams(ProjectParams):
    languages: list[str] = Field(
        default_factory=lambda: list(tpl.DEFAULT_LANGUAGES),
        description="Language codes to support; the first is the default locale",
    )
    include_routing: bool = Field(True, alias="includeRouting", description="Include localized routing (default: true)")
    include_auth_forms: bool = Field(
        True, alias="includeAuthForms", description="Include localized auth forms (default: true)"
    )

    @field_validator("languages")
    @classmethod
    def _normalize(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for code in value:
            code = code.strip().lower()
            if not code:
                continue
            if not LOCALE_CODE.fullmatch(code):
                raise ValueError(f"invalid language code: {code!r}")
            if code not in seen:
                seen.append(code)
        if not seen:
            raise ValueError("at least one language code is required")
        return seen


# ── Builders ────────────────────────────────────────────────────


def config_actions(languages: list[str]) -> list[Action]:
    return [write("i18n.ts", tpl.i18n_config(languages)), write("types/i18n.d.ts", tpl.TYPES)]


def locale_actions(languages: list[str]) -> list[Action]:
    return [write_json(f"locales/{code}.json", tpl.messages(code)) for code in languages]


def routing_actions() -> list[Action]:
    return [
        write("lib/navigation.ts", tpl.NAVIGATION),
        write("app/[locale]/layout.tsx", tpl.LOCALE_LAYOUT),
        write("app/[locale]/page.tsx", tpl.LOCALE_PAGE),
        write("components/i18n/language-switcher.tsx", tpl.LANGUAGE_SWITCHER),
        write("components/i18n/localized-layout.tsx", tpl.LOCALIZED_LAYOUT),
        write("components/i18n/index.ts", tpl.COMPONENTS_INDEX),
    ]


def middleware_step(languages: list[str]) -> Step:
    return step(
        "Creating locale detection middleware...",
        write("middleware.ts", tpl.middleware(languages)),
        when=lacks(Capability.PROTECTED_ROUTES),
        skip="(middleware.ts already exists; merge next-intl's createMiddleware into it by hand)",
    )


def auth_form_step() -> Step:
    return step(
        "Creating localized auth forms and pages...",
        write("components/auth/i18n/login-form.tsx", tpl.AUTH_LOGIN_FORM),
        write("components/auth/i18n/signup-form.tsx", tpl.AUTH_SIGNUP_FORM),
        write("components/auth/i18n/index.ts", tpl.AUTH_COMPONENTS_INDEX),
        write("app/[locale]/auth/login/page.tsx", tpl.AUTH_LOGIN_PAGE),
        write("app/[locale]/auth/signup/page.tsx", tpl.AUTH_SIGNUP_PAGE),
        when=has(Capability.AUTHENTICATION),
        skip="(authentication not found; localized auth forms skipped)",
    )


def next_config_actions(languages: list[str]) -> list[Action]:
    return [write("next.config.ts", tpl.NEXT_CONFIG), write(GUIDE_FILE, tpl.guide(languages))]


# ── setup_internationalization ──────────────────────────────────


def _plan_i18n(params: I18nParams, ctx: RunContext) -> list[Step]:
    languages = params.languages
    steps = [
        step("Installing next-intl...", install_actions("i18n", ctx.package_manager)),
        step("Creating i18n configuration...", config_actions(languages)),
        step(f"Creating locale files for {', '.join(languages)}...", locale_actions(languages)),
    ]
    if params.include_routing:
        steps += [
            step("Setting up localized routing...", routing_actions()),
            middleware_step(languages),
        ]
    if params.include_auth_forms:
        steps.append(auth_form_step())
    steps.append(step("Updating Next.js config and writing i18n guide...", next_config_actions(languages)))
    return steps


def _summarize_i18n(params: I18nParams, report: RunReport, ctx: RunContext) -> str:
    names = [f"{tpl.LANGUAGE_NAMES.get(code, code)} (`{code}`)" for code in params.languages]
    return success_message(
        "Internationalization setup completed successfully!",
        report,
        "🌍 **Languages:**\n" + bullet(names),
        ["Translate the catalogs in `locales/`", f"See {GUIDE_FILE} for adding languages"],
    )


INTERNATIONALIZATION = Operation(
    name="setup_internationalization",
    description="Sets up next-intl internationalization with localized routing",
    params_model=I18nParams,
    plan=_plan_i18n,
    summarize=_summarize_i18n,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.INTERNATIONALIZATION, "Internationalization is already set up in this project."),
    ),
)
