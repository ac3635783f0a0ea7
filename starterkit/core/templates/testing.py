"""Vitest, Playwright and MSW setup."""

VITEST_CONFIG = """\
import react from "@vitejs/plugin-react";
import { resolve } from "node:path";
import { defineConfig } from "vitest/config";

export default defineConfig({
  plugins: [react()],
  test: {
    environment: "jsdom",
    setupFiles: ["./src/test-setup.ts"],
    include: ["__tests__/**/*.test.{ts,tsx}"],
  },
  resolve: { alias: { "@": resolve(__dirname, ".") } },
});
"""

TEST_SETUP = """\
import "@testing-library/jest-dom/vitest";
"""

TEST_SETUP_WITH_MSW = """\
import "@testing-library/jest-dom/vitest";
import { afterAll, afterEach, beforeAll } from "vitest";
import { server } from "./mocks/setup";

beforeAll(() => server.listen({ onUnhandledRequest: "error" }));
afterEach(() => server.resetHandlers());
afterAll(() => server.close());
"""

TEST_UTILS = """\
import { render, type RenderOptions } from "@testing-library/react";

export function renderWithProviders(ui: React.ReactElement, options?: RenderOptions) {
  return render(ui, options);
}

export * from "@testing-library/react";
"""

BUTTON_TEST = """\
import { describe, expect, it } from "vitest";
import { renderWithProviders, screen } from "../test-utils";

describe("button", () => {
  it("renders its label", () => {
    renderWithProviders(<button>Save</button>);
    expect(screen.getByText("Save")).toBeInTheDocument();
  });
});
"""

PLAYWRIGHT_CONFIG = """\
import { defineConfig, devices } from "@playwright/test";

export default defineConfig({
  testDir: "./e2e",
  fullyParallel: true,
  retries: process.env.CI ? 2 : 0,
  use: { baseURL: "http://localhost:3000", trace: "on-first-retry" },
  projects: [{ name: "chromium", use: { ...devices["Desktop Chrome"] } }],
  webServer: { command: "pnpm dev", url: "http://localhost:3000", reuseExistingServer: !process.env.CI },
});
"""

HOMEPAGE_SPEC = """\
import { expect, test } from "@playwright/test";

test("homepage loads", async ({ page }) => {
  await page.goto("/");
  await expect(page).toHaveTitle(/.+/);
});
"""

MSW_HANDLERS = """\
import { http, HttpResponse } from "msw";

export const handlers = [
  http.get("/api/health", () => HttpResponse.json({ ok: true })),
];
"""

MSW_SETUP = """\
import { setupServer } from "msw/node";
import { handlers } from "./handlers";

export const server = setupServer(...handlers);
"""

UNIT_SCRIPTS = {
    "test": "vitest",
    "test:ui": "vitest --ui",
    "test:coverage": "vitest run --coverage",
}

E2E_SCRIPTS = {
    "test:e2e": "playwright test",
    "test:e2e:ui": "playwright test --ui",
}
