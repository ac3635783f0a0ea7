"""Lefthook hooks, lint-staged and commit standards."""

LEFTHOOK = """\
pre-commit:
  parallel: true
  commands:
    lint:
      glob: "*.{js,ts,jsx,tsx,json}"
      run: pnpm exec biome check --write --no-errors-on-unmatched {staged_files}
      stage_fixed: true
    typecheck:
      glob: "*.{ts,tsx}"
      run: pnpm exec tsc --noEmit

commit-msg:
  commands:
    commitlint:
      run: pnpm exec commitlint --edit {1}
"""

LINT_STAGED = {
    "*.{js,jsx,ts,tsx,json}": ["biome check --write --no-errors-on-unmatched"],
}

COMMITLINT = """\
module.exports = { extends: ["@commitlint/config-conventional"] };
"""

CZRC = {"path": "cz-conventional-changelog"}

GITMESSAGE = """\
# <type>(<scope>): <subject>
#
# type: feat | fix | docs | style | refactor | test | chore
# subject: imperative, no period, 72 chars max
"""

DEV_EXPERIENCE_SCRIPTS = {
    "typecheck": "tsc --noEmit",
    "test": "vitest",
    "test:ui": "vitest --ui",
    "test:coverage": "vitest run --coverage",
    "test:e2e": "playwright test",
    "test:e2e:ui": "playwright test --ui",
    "prepare": "lefthook install",
    "commit": "cz",
}

COMMITIZEN_CONFIG = {"commitizen": {"path": "cz-conventional-changelog"}}
