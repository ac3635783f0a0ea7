"""
Shared test fixtures and configuration.

``FakePackageManager`` stands in for the shell adapter: instead of
spawning create-next-app, pnpm, shadcn or git it writes the files those
tools would leave behind, so operations can be exercised end to end
without network access.
"""

import json
import shlex
from pathlib import Path

import pytest

from starterkit.adapters.base import Adapter, ExecutionContext
from starterkit.adapters.registry import AdapterRegistry
from starterkit.adapters.shell.filesystem import FilesystemAdapter
from starterkit.core.config.loader import Settings
from starterkit.core.models.action import Receipt
from starterkit.core.router import Router
from starterkit.core.services.system_checks import SystemReport, ToolCheck

NEXT_MANIFEST = {
    "name": "app",
    "version": "0.1.0",
    "private": True,
    "scripts": {"dev": "next dev", "build": "next build", "start": "next start"},
    "dependencies": {"next": "15.0.0", "react": "19.0.0", "react-dom": "19.0.0"},
    "devDependencies": {"tailwindcss": "4.0.0", "typescript": "5.6.0"},
}


class FakePackageManager(Adapter):
    """Shell adapter double that simulates the scaffolding toolchain.

    ``failures`` maps a command substring to the error text returned
    for any command containing it.
    """

    def __init__(self):
        self.commands: list[str] = []
        self.failures: dict[str, str] = {}

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        if not context.action.params.get("command"):
            return False, "Missing required param: 'command'"
        return True, ""

    def fail_on(self, fragment: str, error: str = "simulated failure") -> None:
        self.failures[fragment] = error

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.params["command"]
        self.commands.append(command)
        root = Path(context.working_dir)

        for fragment, error in self.failures.items():
            if fragment in command:
                return Receipt.failure(adapter=self.name, action_id=context.action.id, error=error)

        args = shlex.split(command)
        if "create-next-app@latest" in command:
            (root / "package.json").write_text(json.dumps(NEXT_MANIFEST, indent=2))
            (root / "next.config.ts").write_text("export default {};\n")
            (root / "app").mkdir(exist_ok=True)
            (root / "app" / "page.tsx").write_text("export default function Page() { return null; }\n")
        elif args[:2] == ["pnpm", "add"]:
            dev = "-D" in args
            packages = [a for a in args[2:] if a != "-D"]
            self._declare(root, packages, dev)
        elif "shadcn@latest init" in command:
            (root / "components.json").write_text('{"style": "new-york"}\n')
        elif "shadcn@latest add" in command:
            ui = root / "components" / "ui"
            ui.mkdir(parents=True, exist_ok=True)
            (ui / "button.tsx").write_text("export function Button() { return null; }\n")
        elif "biome init" in command:
            (root / "biome.json").write_text("{}\n")
        elif args[:2] == ["git", "init"]:
            (root / ".git").mkdir(exist_ok=True)

        return Receipt.success(adapter=self.name, action_id=context.action.id, output=f"ran {command}")

    @staticmethod
    def _declare(root: Path, packages: list[str], dev: bool) -> None:
        manifest = root / "package.json"
        data = json.loads(manifest.read_text()) if manifest.exists() else {}
        section = data.setdefault("devDependencies" if dev else "dependencies", {})
        for package in packages:
            section[package] = "^1.0.0"
        manifest.write_text(json.dumps(data, indent=2))


def make_system(git_version: str | None = "2.43.0", node_ok: bool = True, pm_ok: bool = True) -> SystemReport:
    """Build a SystemReport without probing the host."""
    if git_version is None:
        git = ToolCheck("git", False, error="Git not found or not accessible: not installed")
    elif tuple(int(p) for p in git_version.split(".")) < Settings().min_git_tuple:
        git = ToolCheck("git", False, version=git_version, error=f"Git version {git_version} is too old.")
    else:
        git = ToolCheck("git", True, version=git_version)
    node = ToolCheck("node", True, version="v20.11.0") if node_ok else ToolCheck("node", False, error="Node.js not found: missing")
    pm = ToolCheck("pnpm", True, version="9.1.0") if pm_ok else ToolCheck("pnpm", False, error="pnpm not found. Please install pnpm: npm install -g pnpm")

    report = SystemReport(git=git, node=node, package_manager=pm)
    for check in (node, pm):
        if not check.valid:
            report.errors.append(check.error)
    if not git.valid:
        report.warnings.append(f"{git.error} Git hooks will be skipped.")
    return report


@pytest.fixture
def fake_shell() -> FakePackageManager:
    return FakePackageManager()


@pytest.fixture
def registry(fake_shell: FakePackageManager) -> AdapterRegistry:
    reg = AdapterRegistry()
    reg.register(fake_shell)
    reg.register(FilesystemAdapter())
    return reg


@pytest.fixture
def system_factory():
    return make_system


@pytest.fixture
def system_report() -> SystemReport:
    return make_system()


@pytest.fixture
def router(registry: AdapterRegistry, system_report: SystemReport, tmp_path: Path) -> Router:
    """Router wired to the fake toolchain, a healthy system and a private lock dir."""
    return Router(
        registry=registry,
        system_check=lambda _settings: system_report,
        lock_dir=tmp_path / "locks",
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """An empty target directory."""
    path = tmp_path / "my-app"
    path.mkdir()
    return path


@pytest.fixture
def nextjs_project(router: Router, project: Path) -> Path:
    """A target that already went through create_nextjs_base."""
    response = router.dispatch("create_nextjs_base", {"projectPath": str(project), "includeShadcn": False})
    assert not response.is_error, response.content
    return project
