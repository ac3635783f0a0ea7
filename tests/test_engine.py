"""
Tests for the step sequencer — ordering, gating, fatal and non-fatal failures.
"""

from pathlib import Path

import pytest

from starterkit.adapters.mock import MockAdapter
from starterkit.adapters.registry import AdapterRegistry
from starterkit.adapters.shell.command import ShellCommandAdapter
from starterkit.adapters.shell.filesystem import FilesystemAdapter
from starterkit.core.engine.executor import RunContext, run_operation
from starterkit.core.errors import PreconditionError, StepFailedError
from starterkit.core.models.action import Action
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, RunStatus, StepStatus, refuses, requires
from starterkit.core.operations.common import OperationParams, has, step, write


class ToyParams(OperationParams):
    project_path: str | None = None
    strict: bool = True


def _operation(steps, preconditions=()):
    return Operation(
        name="toy",
        description="toy operation",
        params_model=ToyParams,
        plan=lambda params, ctx: steps,
        summarize=lambda params, report, ctx: "done",
        preconditions=tuple(preconditions),
    )


@pytest.fixture
def shell() -> MockAdapter:
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def context(shell: MockAdapter, tmp_path: Path) -> RunContext:
    registry = AdapterRegistry()
    registry.register(shell)
    registry.register(FilesystemAdapter())
    return RunContext(project_root=tmp_path, registry=registry)


def _cmd_steps(*names):
    return [step(name, Action.command(name)) for name in names]


class TestSequencing:
    def test_all_steps_complete_in_order(self, context, shell):
        report = run_operation(_operation(_cmd_steps("one", "two", "three")), ToyParams(), context)
        assert report.status == RunStatus.COMPLETED
        assert report.completed == ["one", "two", "three"]
        assert shell.commands == ["one", "two", "three"]

    def test_step_without_actions_succeeds(self, context):
        report = run_operation(_operation([step("validate")]), ToyParams(), context)
        assert report.completed == ["validate"]

    def test_actions_run_in_order_within_a_step(self, context, shell):
        run_operation(_operation([step("multi", Action.command("a"), Action.command("b"))]), ToyParams(), context)
        assert shell.commands == ["a", "b"]


class TestFatalFailure:
    def test_k_minus_one_completed(self, context, shell):
        shell.set_failure("shell:three", "boom")
        with pytest.raises(StepFailedError) as exc:
            run_operation(_operation(_cmd_steps("one", "two", "three", "four")), ToyParams(), context)

        err = exc.value
        assert err.step == "three"
        assert err.error == "boom"
        assert err.completed == ["one", "two"]
        assert err.project_path == str(context.project_root)
        assert "four" not in shell.commands

    def test_rendered_block(self, context, shell):
        shell.set_failure("shell:two", "exit 1")
        with pytest.raises(StepFailedError) as exc:
            run_operation(_operation(_cmd_steps("one", "two")), ToyParams(), context)

        text = str(exc.value)
        assert text.startswith('❌ Failed at step: "two"')
        assert "🔍 Error Details: exit 1" in text
        assert f"📍 Project Path: {context.project_root}" in text
        assert text.endswith("✅ Completed Steps:\n1. one")

    def test_first_step_failure_lists_none(self, context, shell):
        shell.set_failure("shell:one")
        with pytest.raises(StepFailedError) as exc:
            run_operation(_operation(_cmd_steps("one")), ToyParams(), context)
        assert exc.value.completed == []
        assert str(exc.value).endswith("(none)")

    def test_later_action_in_failed_step_not_run(self, context, shell):
        shell.set_failure("shell:a")
        with pytest.raises(StepFailedError):
            run_operation(_operation([step("multi", Action.command("a"), Action.command("b"))]), ToyParams(), context)
        assert shell.commands == ["a"]


class TestNonFatal:
    def test_failure_is_recorded_and_run_continues(self, context, shell):
        shell.set_failure("shell:optional", "no browsers")
        steps = [
            step("one", Action.command("one")),
            step("optional", Action.command("optional"), fatal=False),
            step("two", Action.command("two")),
        ]
        report = run_operation(_operation(steps), ToyParams(), context)
        assert report.status == RunStatus.COMPLETED
        assert report.completed == ["one", "two"]
        assert [w.description for w in report.warnings] == ["optional"]
        assert report.warnings[0].detail == "no browsers"
        assert "⚠️  optional — no browsers" in report.render_steps()


class TestGating:
    def test_skipped_step_is_not_completed(self, context, shell):
        steps = [
            step("one", Action.command("one")),
            step("gated", Action.command("gated"), when=has(Capability.DRIZZLE), skip="(no drizzle)"),
        ]
        report = run_operation(_operation(steps), ToyParams(), context)
        assert report.completed == ["one"]
        assert report.skipped[0].status == StepStatus.SKIPPED
        assert report.skipped[0].detail == "(no drizzle)"
        assert "gated" not in shell.commands

    def test_gate_sees_effects_of_earlier_steps(self, context, shell):
        steps = [
            step("config", write("next.config.ts", "export default {};")),
            step("after", Action.command("after"), when=has(Capability.NEXTJS)),
        ]
        report = run_operation(_operation(steps), ToyParams(), context)
        assert report.completed == ["config", "after"]


class TestPreconditions:
    def test_required_capability_missing(self, context, shell):
        op = _operation(_cmd_steps("one"), [requires(Capability.NEXTJS, "need next")])
        with pytest.raises(PreconditionError, match="need next"):
            run_operation(op, ToyParams(), context)
        assert shell.call_count == 0

    def test_refused_capability_present(self, context, shell, tmp_path: Path):
        (tmp_path / "biome.json").write_text("{}")
        op = _operation(_cmd_steps("one"), [refuses(Capability.BIOME, "already there")])
        with pytest.raises(PreconditionError, match="already there"):
            run_operation(op, ToyParams(), context)
        assert shell.call_count == 0

    def test_flag_disables_check(self, context):
        op = _operation(_cmd_steps("one"), [requires(Capability.NEXTJS, "need next", flag="strict")])
        report = run_operation(op, ToyParams(strict=False), context)
        assert report.completed == ["one"]

    def test_first_failing_check_wins(self, context):
        op = _operation(
            _cmd_steps("one"),
            [requires(Capability.NEXTJS, "first"), requires(Capability.DRIZZLE, "second")],
        )
        with pytest.raises(PreconditionError, match="first"):
            run_operation(op, ToyParams(), context)


# ── Real shell ───────────────────────────────────────────────────────


@pytest.fixture
def real_context(tmp_path: Path) -> RunContext:
    return RunContext(project_root=tmp_path, registry=AdapterRegistry([ShellCommandAdapter(), FilesystemAdapter()]))


class TestRealShellSteps:
    def test_error_on_stderr_halts_despite_exit_zero(self, real_context, tmp_path: Path):
        steps = [
            step("Writing marker...", write("before.txt", "x")),
            step("Installing packages...", Action.command("echo 'Error: module not found' >&2")),
            step("Never reached...", write("after.txt", "x")),
        ]
        with pytest.raises(StepFailedError) as exc:
            run_operation(_operation(steps), ToyParams(), real_context)

        assert exc.value.step == "Installing packages..."
        assert "stderr-error" in exc.value.error
        assert "Error: module not found" in exc.value.error
        assert exc.value.completed == ["Writing marker..."]
        assert (tmp_path / "before.txt").exists()
        assert not (tmp_path / "after.txt").exists()

    def test_warning_on_stderr_continues(self, real_context, tmp_path: Path):
        steps = [
            step("Installing packages...", Action.command("echo 'npm WARN deprecated error-ex' >&2")),
            step("Writing marker...", write("after.txt", "x")),
        ]
        report = run_operation(_operation(steps), ToyParams(), real_context)
        assert report.completed == ["Installing packages...", "Writing marker..."]
        assert (tmp_path / "after.txt").exists()

    def test_nonzero_exit_halts(self, real_context):
        steps = [step("Failing command...", Action.command("exit 7"))]
        with pytest.raises(StepFailedError) as exc:
            run_operation(_operation(steps), ToyParams(), real_context)
        assert "nonzero-exit" in exc.value.error
        assert exc.value.completed == []
