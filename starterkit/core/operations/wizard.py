"""
setup_nextjs_project_wizard — describe the available feature groups.

Has no steps: the response is a menu the caller uses to pick features
for ``create_nextjs_app`` or the individual setup operations.
"""

from __future__ import annotations

import json

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.report import RunReport
from starterkit.core.models.step import Operation, Step
from starterkit.core.operations.common import ProjectParams

_MENU = """\
🚀 **Next.js Project Setup Wizard**

Pick the features to include in your Next.js project:

## 🏗️ **Core Features** (Always Included)
- ✅ Next.js with TypeScript
- ✅ Tailwind CSS
- ✅ App Router

## 🎨 **UI Components**
- **shadcn/ui**: accessible components, all of them or just the basics

## 💾 **Database & Environment**
- **Database**: PostgreSQL, MySQL or SQLite with Drizzle ORM
- **Environment**: Type-safe environment variables with T3 Env

## 🔐 **Authentication**
- **JWT Authentication**: login/signup with session cookies
- **Protected Routes**: middleware for route protection

## 💳 **Payments** (requires authentication)
- **Stripe Integration**: subscriptions and one-time payments
- **Customer Portal**: self-service billing management
- **Webhooks**: payment event handling

## 👥 **Team Management** (requires database + auth)
- **Multi-tenant**: team creation and management
- **Role-based permissions**: owner, admin, member
- **Activity logging**: track team actions

## 🛠️ **Development Experience**
- **Testing**: Vitest (unit) + Playwright (E2E) + MSW (mocking)
- **Linting**: Biome
- **Git Workflow**: hooks, commit standards, lint-staged
- **Forms**: React Hook Form + Zod validation + React Query

## 🌍 **Internationalization**
- **Multi-language**: six languages out of the box
- **Dynamic routing**: locale-based routing
- **Translated components**: auth forms and UI in every language

---

**How to proceed:**
1. Tell me which features you want (e.g. "core + database + authentication")
2. Or call `create_nextjs_app` with specific features:
   ```
   create_nextjs_app({example})
   ```

**Quick options:**
- "**Minimal**": just core + shadcn/ui
- "**Starter**": core + database + auth + testing
- "**Full SaaS**": everything included
- "**Custom**": tell me exactly what you want

What would you like to include in your Next.js project?"""


def wizard_text(project_path: str) -> str:
    example = {
        "projectPath": project_path,
        "features": {
            "core": True,
            "database": True,
            "authentication": True,
            "payments": False,
            "teamManagement": False,
            "devExperience": True,
            "internationalization": False,
        },
    }
    return _MENU.replace("{example}", json.dumps(example, indent=2).replace("\n", "\n   "))


def _plan_wizard(params: ProjectParams, ctx: RunContext) -> list[Step]:
    return []


def _summarize_wizard(params: ProjectParams, report: RunReport, ctx: RunContext) -> str:
    return wizard_text(params.project_path)


PROJECT_WIZARD = Operation(
    name="setup_nextjs_project_wizard",
    description=(
        "Interactive wizard to set up a Next.js project with customizable features. "
        "Start here to choose what to include."
    ),
    params_model=ProjectParams,
    plan=_plan_wizard,
    summarize=_summarize_wizard,
)
