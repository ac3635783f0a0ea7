"""
Tests for adapter protocol, registry, mock, shell and filesystem adapters.
"""

import json
from pathlib import Path

import pytest

from starterkit.adapters.base import ExecutionContext
from starterkit.adapters.mock import MockAdapter
from starterkit.adapters.registry import AdapterRegistry
from starterkit.adapters.shell.command import ShellCommandAdapter, run_command, stderr_is_fatal
from starterkit.adapters.shell.filesystem import (
    FilesystemAdapter,
    append_lines,
    ensure_marker,
    merge_documents,
    merge_json,
    read_json,
    write_text,
)
from starterkit.core.errors import ExecutionError, MaterializeError
from starterkit.core.models.action import Action, Receipt

# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_working_dir_defaults_to_root(self):
        ctx = ExecutionContext(action=Action(id="a", adapter="shell"), project_root="/project")
        assert ctx.working_dir == "/project"

    def test_working_dir_override(self):
        ctx = ExecutionContext(
            action=Action(id="a", adapter="shell"),
            project_root="/project",
            params={"cwd": "/elsewhere"},
        )
        assert ctx.working_dir == "/elsewhere"


class TestActionShorthands:
    def test_command(self):
        action = Action.command("pnpm add zod")
        assert action.adapter == "shell"
        assert action.params == {"command": "pnpm add zod"}

    def test_file(self):
        action = Action.file("write", "lib/x.ts", content="x")
        assert action.adapter == "filesystem"
        assert action.params["operation"] == "write"
        assert action.params["path"] == "lib/x.ts"


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockAdapter:
    def test_default_success(self):
        mock = MockAdapter(adapter_name="shell")
        receipt = mock.execute(ExecutionContext(action=Action.command("echo hi")))
        assert receipt.ok
        assert mock.commands == ["echo hi"]

    def test_set_failure(self):
        mock = MockAdapter()
        mock.set_failure("op-fail", error="Intentional failure")
        receipt = mock.execute(ExecutionContext(action=Action(id="op-fail", adapter="mock")))
        assert receipt.failed
        assert "Intentional failure" in receipt.error

    def test_reset(self):
        mock = MockAdapter()
        mock.execute(ExecutionContext(action=Action(id="x", adapter="mock")))
        mock.reset()
        assert mock.call_count == 0


# ── Registry Tests ───────────────────────────────────────────────────


class TestAdapterRegistry:
    def test_default_wiring(self):
        registry = AdapterRegistry.default()
        assert set(registry.list_adapters()) == {"shell", "filesystem"}

    def test_unknown_adapter(self):
        receipt = AdapterRegistry().execute_action(Action(id="x", adapter="nope"))
        assert receipt.failed
        assert "No adapter registered" in receipt.error

    def test_validation_failure_is_a_receipt(self, tmp_path: Path):
        registry = AdapterRegistry()
        registry.register(FilesystemAdapter())
        receipt = registry.execute_action(
            Action(id="x", adapter="filesystem", params={"operation": "explode", "path": "a"}),
            project_root=str(tmp_path),
        )
        assert receipt.failed
        assert "Unknown operation" in receipt.error

    def test_raising_adapter_is_contained(self):
        class Boom(MockAdapter):
            def execute(self, context):
                raise RuntimeError("kaboom")

        registry = AdapterRegistry()
        registry.register(Boom(adapter_name="boom"))
        receipt = registry.execute_action(Action(id="x", adapter="boom"))
        assert receipt.failed
        assert "kaboom" in receipt.error

    def test_later_registration_wins(self):
        first, second = MockAdapter("shell"), MockAdapter("shell")
        registry = AdapterRegistry([first])
        registry.register(second)
        registry.execute_action(Action.command("echo hi"))
        assert first.call_count == 0
        assert second.commands == ["echo hi"]

    def test_action_timeout_overrides_default(self):
        mock = MockAdapter("shell")
        registry = AdapterRegistry([mock])
        registry.execute_action(Action.command("sleep 1", timeout=5), timeout=300)
        assert mock.calls[0].timeout == 5


# ── Shell Command Tests ──────────────────────────────────────────────


class TestStderrClassification:
    def test_empty(self):
        assert not stderr_is_fatal("")

    def test_error_is_fatal(self):
        assert stderr_is_fatal("Error: Cannot find module 'next'")

    def test_case_insensitive(self):
        assert stderr_is_fatal("something ERRORED")

    def test_warn_marker_downgrades(self):
        assert not stderr_is_fatal("npm WARN deprecated: error-ex@1.0.0")

    def test_warning_marker_downgrades(self):
        assert not stderr_is_fatal("warning: error handling changed")

    def test_benign_word_still_fatal(self):
        assert stderr_is_fatal("ErrorBoundary generated")

    def test_plain_progress(self):
        assert not stderr_is_fatal("Progress: resolved 312, reused 300")


class TestRunCommand:
    def test_stdout_returned(self, tmp_path: Path):
        assert run_command("echo hello", tmp_path).strip() == "hello"

    def test_runs_in_cwd(self, tmp_path: Path):
        assert run_command("pwd", tmp_path).strip() == str(tmp_path.resolve())

    def test_nonzero_exit(self, tmp_path: Path):
        with pytest.raises(ExecutionError) as exc:
            run_command("exit 3", tmp_path)
        assert exc.value.reason == "nonzero-exit"
        assert "code 3" in exc.value.detail

    def test_nonzero_exit_prefers_stderr(self, tmp_path: Path):
        with pytest.raises(ExecutionError) as exc:
            run_command("echo 'disk full' >&2; exit 1", tmp_path)
        assert exc.value.detail == "disk full"

    def test_timeout(self, tmp_path: Path):
        with pytest.raises(ExecutionError) as exc:
            run_command("sleep 5", tmp_path, timeout=1)
        assert exc.value.reason == "timeout"
        assert "timed out after 1s" in str(exc.value)

    def test_stderr_error_with_exit_zero(self, tmp_path: Path):
        with pytest.raises(ExecutionError) as exc:
            run_command("echo 'Error: boom' >&2", tmp_path)
        assert exc.value.reason == "stderr-error"

    def test_stderr_warning_with_exit_zero(self, tmp_path: Path):
        assert run_command("echo 'WARN error-ex deprecated' >&2; echo ok", tmp_path).strip() == "ok"

    def test_missing_cwd_is_spawn_error(self, tmp_path: Path):
        with pytest.raises(ExecutionError) as exc:
            run_command("true", tmp_path / "absent")
        assert exc.value.reason == "spawn-error"


class TestShellCommandAdapter:
    def test_missing_command(self, tmp_path: Path):
        adapter = ShellCommandAdapter()
        ctx = ExecutionContext(action=Action(id="x", adapter="shell"), project_root=str(tmp_path))
        valid, error = adapter.validate(ctx)
        assert not valid
        assert "command" in error

    def test_missing_directory(self, tmp_path: Path):
        adapter = ShellCommandAdapter()
        ctx = ExecutionContext(action=Action.command("true"), project_root=str(tmp_path / "nope"))
        valid, error = adapter.validate(ctx)
        assert not valid
        assert "does not exist" in error

    def test_failure_receipt(self, tmp_path: Path):
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
        receipt = registry.execute_action(Action.command("exit 2"), project_root=str(tmp_path))
        assert receipt.failed
        assert receipt.metadata["reason"] == "nonzero-exit"

    def test_success_receipt(self, tmp_path: Path):
        registry = AdapterRegistry()
        registry.register(ShellCommandAdapter())
        receipt = registry.execute_action(Action.command("echo done"), project_root=str(tmp_path))
        assert receipt.ok
        assert receipt.output == "done"


# ── Filesystem Tests ─────────────────────────────────────────────────


class TestFilesystemHelpers:
    def test_write_creates_parents(self, tmp_path: Path):
        write_text(tmp_path, "a/b/c.ts", "x")
        assert (tmp_path / "a" / "b" / "c.ts").read_text() == "x"

    def test_write_if_missing_keeps_existing(self, tmp_path: Path):
        (tmp_path / ".env.local").write_text("SECRET=1")
        assert write_text(tmp_path, ".env.local", "SECRET=", if_missing=True) is False
        assert (tmp_path / ".env.local").read_text() == "SECRET=1"

    def test_write_under_a_file_fails(self, tmp_path: Path):
        (tmp_path / "lib").write_text("not a dir")
        with pytest.raises(MaterializeError) as exc:
            write_text(tmp_path, "lib/x.ts", "x")
        assert "lib" in exc.value.path

    @pytest.mark.parametrize("rel", ["../outside.json", "locales/../../outside.json", "/etc/outside.json"])
    def test_paths_outside_root_refused(self, tmp_path: Path, rel):
        root = tmp_path / "app"
        root.mkdir()
        with pytest.raises(MaterializeError) as exc:
            write_text(root, rel, "{}")
        assert "escapes the project directory" in exc.value.detail
        assert not (tmp_path / "outside.json").exists()

    def test_dotdot_inside_root_allowed(self, tmp_path: Path):
        write_text(tmp_path, "lib/../types/x.ts", "x")
        assert (tmp_path / "types" / "x.ts").read_text() == "x"

    def test_merge_documents_keeps_siblings(self):
        merged = merge_documents(
            {"name": "app", "scripts": {"dev": "next dev"}},
            {"scripts": {"lint": "biome check ."}},
        )
        assert merged == {"name": "app", "scripts": {"dev": "next dev", "lint": "biome check ."}}

    def test_merge_json_on_disk(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"next": "15"}}))
        merge_json(tmp_path, "package.json", {"dependencies": {"zod": "3"}, "config": {"a": 1}})
        data = json.loads((tmp_path / "package.json").read_text())
        assert data["dependencies"] == {"next": "15", "zod": "3"}
        assert data["config"] == {"a": 1}

    def test_read_json_missing(self, tmp_path: Path):
        assert read_json(tmp_path, "package.json") == {}

    def test_read_json_not_object(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("[1, 2]")
        with pytest.raises(MaterializeError):
            read_json(tmp_path, "package.json")

    def test_read_json_malformed(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{nope")
        with pytest.raises(MaterializeError):
            read_json(tmp_path, "package.json")

    def test_marker_in_empty_dir(self, tmp_path: Path):
        assert ensure_marker(tmp_path, "lib/db") is True
        assert (tmp_path / "lib" / "db" / ".gitkeep").exists()

    def test_marker_ignores_readme(self, tmp_path: Path):
        (tmp_path / "types").mkdir()
        (tmp_path / "types" / "README.md").write_text("# Types")
        assert ensure_marker(tmp_path, "types") is True

    def test_marker_skipped_when_dir_has_files(self, tmp_path: Path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "utils.ts").write_text("")
        assert ensure_marker(tmp_path, "lib") is False
        assert not (tmp_path / "lib" / ".gitkeep").exists()

    def test_append_lines_once(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("node_modules")
        assert append_lines(tmp_path, ".gitignore", [".env.local", ".env"]) == 2
        assert append_lines(tmp_path, ".gitignore", [".env.local", ".env"]) == 0
        assert (tmp_path / ".gitignore").read_text() == "node_modules\n.env.local\n.env\n"


class TestFilesystemAdapter:
    def _run(self, tmp_path: Path, action: Action) -> Receipt:
        registry = AdapterRegistry()
        registry.register(FilesystemAdapter())
        return registry.execute_action(action, project_root=str(tmp_path))

    def test_write(self, tmp_path: Path):
        receipt = self._run(tmp_path, Action.file("write", "lib/a.ts", content="export {};"))
        assert receipt.ok
        assert (tmp_path / "lib" / "a.ts").exists()

    def test_missing_content(self, tmp_path: Path):
        receipt = self._run(tmp_path, Action.file("write", "lib/a.ts"))
        assert receipt.failed
        assert "content" in receipt.error

    def test_merge_requires_mapping(self, tmp_path: Path):
        receipt = self._run(tmp_path, Action.file("merge_json", "package.json", content=["x"]))
        assert receipt.failed

    def test_materialize_error_becomes_receipt(self, tmp_path: Path):
        (tmp_path / "lib").write_text("file")
        receipt = self._run(tmp_path, Action.file("write", "lib/a.ts", content="x"))
        assert receipt.failed
        assert receipt.error.startswith("Filesystem error:")
