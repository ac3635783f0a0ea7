"""next-intl configuration, locales and localized routing."""

from __future__ import annotations

import json

DEFAULT_LANGUAGES = ["en", "es", "fr", "de", "ja", "zh"]

LANGUAGE_NAMES = {
    "en": "English", "es": "Español", "fr": "Français",
    "de": "Deutsch", "ja": "日本語", "zh": "中文",
}

# Base message catalog, translated per locale where a translation exists
_MESSAGES = {
    "en": {"common": {"welcome": "Welcome", "signIn": "Sign in", "signUp": "Sign up", "signOut": "Sign out"}},
    "es": {"common": {"welcome": "Bienvenido", "signIn": "Iniciar sesión", "signUp": "Registrarse", "signOut": "Cerrar sesión"}},
    "fr": {"common": {"welcome": "Bienvenue", "signIn": "Se connecter", "signUp": "S'inscrire", "signOut": "Se déconnecter"}},
    "de": {"common": {"welcome": "Willkommen", "signIn": "Anmelden", "signUp": "Registrieren", "signOut": "Abmelden"}},
    "ja": {"common": {"welcome": "ようこそ", "signIn": "ログイン", "signUp": "登録", "signOut": "ログアウト"}},
    "zh": {"common": {"welcome": "欢迎", "signIn": "登录", "signUp": "注册", "signOut": "退出"}},
}


def messages(language: str) -> dict:
    """Message catalog for ``language``, English for unknown codes."""
    return _MESSAGES.get(language, _MESSAGES["en"])


def i18n_config(languages: list[str]) -> str:
    default = languages[0] if languages else "en"
    return f"""\
import {{ getRequestConfig }} from "next-intl/server";

export const locales = {json.dumps(languages)} as const;
export const defaultLocale = "{default}";
export type Locale = (typeof locales)[number];

export default getRequestConfig(async ({{ requestLocale }}) => {{
  const requested = await requestLocale;
  const locale = locales.includes(requested as Locale) ? (requested as Locale) : defaultLocale;
  return {{ locale, messages: (await import(`./locales/${{locale}}.json`)).default }};
}});
"""


def middleware(languages: list[str]) -> str:
    default = languages[0] if languages else "en"
    return f"""\
import createMiddleware from "next-intl/middleware";

export default createMiddleware({{
  locales: {json.dumps(languages)},
  defaultLocale: "{default}",
  localePrefix: "as-needed",
}});

export const config = {{ matcher: ["/((?!api|_next|_vercel|.*\\\\..*).*)"] }};
"""


def saas_middleware(languages: list[str]) -> str:
    """Locale middleware that keeps the dashboard session check."""
    default = languages[0] if languages else "en"
    return f"""\
import createMiddleware from "next-intl/middleware";
import {{ NextResponse, type NextRequest }} from "next/server";

const intlMiddleware = createMiddleware({{
  locales: {json.dumps(languages)},
  defaultLocale: "{default}",
  localePrefix: "as-needed",
}});

export default function middleware(request: NextRequest) {{
  const isProtected = /^(\\/[a-z]{{2}})?\\/dashboard/.test(request.nextUrl.pathname);
  if (isProtected && !request.cookies.get("session")) {{
    return NextResponse.redirect(new URL("/auth/login", request.url));
  }}
  return intlMiddleware(request);
}}

export const config = {{ matcher: ["/((?!api|_next|_vercel|.*\\\\..*).*)"] }};
"""


NAVIGATION = """\
import { createNavigation } from "next-intl/navigation";
import { locales } from "@/i18n";

export const { Link, redirect, usePathname, useRouter } = createNavigation({ locales });
"""

LOCALE_LAYOUT = """\
import { NextIntlClientProvider } from "next-intl";
import { getMessages } from "next-intl/server";

export default async function LocaleLayout({
  children,
  params,
}: {
  children: React.ReactNode;
  params: Promise<{ locale: string }>;
}) {
  const { locale } = await params;
  const messages = await getMessages();
  return (
    <html lang={locale}>
      <body>
        <NextIntlClientProvider messages={messages}>{children}</NextIntlClientProvider>
      </body>
    </html>
  );
}
"""

LOCALE_PAGE = """\
import { useTranslations } from "next-intl";

export default function HomePage() {
  const t = useTranslations("common");
  return <h1>{t("welcome")}</h1>;
}
"""

LANGUAGE_SWITCHER = """\
"use client";

import { useLocale } from "next-intl";
import { usePathname, useRouter } from "@/lib/navigation";
import { locales } from "@/i18n";

export function LanguageSwitcher() {
  const locale = useLocale();
  const router = useRouter();
  const pathname = usePathname();
  return (
    <select value={locale} onChange={(e) => router.replace(pathname, { locale: e.target.value })}>
      {locales.map((l) => <option key={l} value={l}>{l.toUpperCase()}</option>)}
    </select>
  );
}
"""

LOCALIZED_LAYOUT = """\
import { LanguageSwitcher } from "./language-switcher";

export function LocalizedLayout({ children }: { children: React.ReactNode }) {
  return (
    <>
      <header className="flex justify-end p-4"><LanguageSwitcher /></header>
      {children}
    </>
  );
}
"""

COMPONENTS_INDEX = """\
export { LanguageSwitcher } from "./language-switcher";
export { LocalizedLayout } from "./localized-layout";
"""

AUTH_LOGIN_FORM = """\
"use client";

import { useTranslations } from "next-intl";
import { LoginForm } from "@/components/auth/login-form";

export function LocalizedLoginForm() {
  const t = useTranslations("common");
  return <section aria-label={t("signIn")}><LoginForm /></section>;
}
"""

AUTH_SIGNUP_FORM = """\
"use client";

import { useTranslations } from "next-intl";
import { SignupForm } from "@/components/auth/signup-form";

export function LocalizedSignupForm() {
  const t = useTranslations("common");
  return <section aria-label={t("signUp")}><SignupForm /></section>;
}
"""

AUTH_COMPONENTS_INDEX = """\
export { LocalizedLoginForm } from "./login-form";
export { LocalizedSignupForm } from "./signup-form";
"""

AUTH_LOGIN_PAGE = """\
import { LocalizedLoginForm } from "@/components/auth/i18n";

export default function LoginPage() {
  return <main className="mx-auto max-w-sm py-16"><LocalizedLoginForm /></main>;
}
"""

AUTH_SIGNUP_PAGE = """\
import { LocalizedSignupForm } from "@/components/auth/i18n";

export default function SignupPage() {
  return <main className="mx-auto max-w-sm py-16"><LocalizedSignupForm /></main>;
}
"""

TYPES = """\
import type en from "@/locales/en.json";

type Messages = typeof en;

declare global {
  interface IntlMessages extends Messages {}
}
"""

NEXT_CONFIG = """\
import type { NextConfig } from "next";
import createNextIntlPlugin from "next-intl/plugin";

const withNextIntl = createNextIntlPlugin("./i18n.ts");

const nextConfig: NextConfig = {};

export default withNextIntl(nextConfig);
"""


def guide(languages: list[str]) -> str:
    rows = "\n".join(f"| `{code}` | {LANGUAGE_NAMES.get(code, code)} |" for code in languages)
    return f"""\
# Internationalization

Translations live in `locales/<code>.json` and are loaded by `i18n.ts`.

| Code | Language |
|------|----------|
{rows}

Add a language by creating its catalog and appending the code to `locales` in `i18n.ts`.
"""
