"""Folder READMEs and the project structure guide."""

FOLDERS = ["actions", "components", "lib", "lib/constants", "lib/db", "types"]

ENHANCED_FOLDERS = ["libs", "models", "validations"]

FOLDER_READMES = {
    "actions/README.md": """\
# Server Actions

Put `"use server"` functions here, one file per domain (`auth.ts`, `team.ts`).
Validate input with the schemas in `validations/` before touching the database.
""",
    "components/README.md": """\
# Components

- `ui/` holds shadcn/ui primitives. Do not edit them by hand.
- Feature folders (`auth/`, `payments/`, `teams/`) compose those primitives.
""",
    "lib/README.md": """\
# Library

Framework-agnostic helpers. Nothing in here should import from `app/`.
""",
    "lib/db/README.md": """\
# Database

Drizzle client, schema and query helpers. Run `pnpm db:generate` after
changing the schema.
""",
}

STRUCTURE_GUIDE = """\
# Project Structure

| Folder         | Purpose                                   |
|----------------|-------------------------------------------|
| `actions/`     | Server actions                            |
| `components/`  | React components (shadcn/ui under `ui/`)  |
| `lib/`         | Helpers, database client, auth, payments  |
| `libs/`        | Third-party integrations                  |
| `models/`      | Drizzle table definitions                 |
| `validations/` | Zod schemas shared by client and server   |
| `types/`       | Shared TypeScript types                   |
"""

CORE_SCRIPTS = {
    "components:format:fix": "biome check --write components",
}

DATABASE_SCRIPTS = {
    "db:setup": "npx tsx lib/db/setup.ts",
    "db:seed": "npx tsx lib/db/seed.ts",
    "db:generate": "drizzle-kit generate",
    "db:migrate": "drizzle-kit migrate",
}

BASIC_COMPONENTS = ["button", "input", "card", "label", "form", "dialog", "dropdown-menu"]
