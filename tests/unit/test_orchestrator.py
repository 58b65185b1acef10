"""Unit tests for the BuildOrchestrator and the overall status rules."""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar

import pytest

from wppack.config import PackagerSettings
from wppack.core.orchestrator import BuildOrchestrator, overall_status
from wppack.models.config import BuildConfig, VersionSource
from wppack.models.reports import BuildStatus
from wppack.models.steps import StepOutcome, StepOutput, StepResult
from wppack.models.validation import ValidationReport, ValidationStatus
from wppack.steps.base import BaseStep, StepError


class _Noop(BaseStep):
    @property
    def step_id(self) -> str:
        return "noop"

    @property
    def display_name(self) -> str:
        return "No-op"

    def execute(self, ctx, runner) -> StepOutput:
        return StepOutput(message="ok")


class _Broken(BaseStep):
    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "broken"

    @property
    def display_name(self) -> str:
        return "Broken"

    def execute(self, ctx, runner) -> StepOutput:
        raise StepError("kaput")


def _result(outcome: StepOutcome, warnings: list[str] | None = None) -> StepResult:
    return StepResult(step_id="s", display_name="S", outcome=outcome, warnings=warnings or [])


def _report(status: ValidationStatus) -> ValidationReport:
    return ValidationReport(build_dir=Path("build"), status=status)


class TestOverallStatus:
    def test_all_passed(self):
        results = [_result(StepOutcome.PASSED), _result(StepOutcome.FALLBACK)]
        assert overall_status(results, _report(ValidationStatus.PASS), False) == BuildStatus.PASSED

    @pytest.mark.parametrize("outcome", [StepOutcome.SKIPPED, StepOutcome.WARNING])
    def test_degraded_steps(self, outcome: StepOutcome):
        results = [_result(StepOutcome.PASSED), _result(outcome)]
        assert overall_status(results, None, False) == BuildStatus.PASSED_WITH_WARNINGS

    def test_fallback_warnings_degrade(self):
        results = [_result(StepOutcome.FALLBACK, warnings=["copied verbatim"])]
        assert overall_status(results, None, False) == BuildStatus.PASSED_WITH_WARNINGS

    def test_validation_warning_degrades(self):
        results = [_result(StepOutcome.PASSED)]
        status = overall_status(results, _report(ValidationStatus.WARNING), False)
        assert status == BuildStatus.PASSED_WITH_WARNINGS

    def test_aborted_fails(self):
        assert overall_status([_result(StepOutcome.PASSED)], None, True) == BuildStatus.FAILED

    def test_validation_fail_only_degrades(self):
        status = overall_status([_result(StepOutcome.PASSED)], _report(ValidationStatus.FAIL), False)
        assert status == BuildStatus.PASSED_WITH_WARNINGS


class TestBuildOrchestrator:
    def test_prepare_context_once(self, plugin_project, fake_runner, make_which):
        orch = BuildOrchestrator(
            plugin_project,
            settings=PackagerSettings(step_timeout_seconds=30),
            runner=fake_runner,
            which=make_which("npm"),
        )
        ctx = orch.prepare_context()

        assert ctx is orch.prepare_context()
        assert ctx.version == "11.5.1"
        assert ctx.version_source == VersionSource.MANIFEST
        assert ctx.tools.npm
        assert not ctx.tools.task_runner
        assert ctx.command_timeout == 30
        assert ctx.run_as_user is None

    def test_config_loaded_from_project(self, make_plugin_project, fake_runner):
        project = make_plugin_project(files={"wppack.json": '{"plugin_slug": "bp"}'})
        orch = BuildOrchestrator(project, runner=fake_runner)
        assert orch.config.plugin_slug == "bp"

    def test_abort_is_reported_not_raised(self, plugin_project, fake_runner, make_which):
        orch = BuildOrchestrator(
            plugin_project,
            BuildConfig(),
            settings=PackagerSettings(),
            runner=fake_runner,
            steps=[_Noop(), _Broken()],
            which=make_which(),
        )
        seen: list[StepResult] = []
        summary = orch.run(on_result=seen.append)

        assert summary.status == BuildStatus.FAILED
        assert summary.exit_code == 1
        assert summary.aborted_at == "broken"
        assert summary.abort_reason == "kaput"
        assert [r.outcome for r in summary.results] == [StepOutcome.PASSED, StepOutcome.FAILED]
        assert seen == summary.results

    def test_clean_run_passes(self, plugin_project, fake_runner, make_which):
        orch = BuildOrchestrator(
            plugin_project, runner=fake_runner, steps=[_Noop()], which=make_which()
        )
        summary = orch.run()
        assert summary.status == BuildStatus.PASSED
        assert summary.exit_code == 0
        assert summary.total_files == 0
        assert summary.version == "11.5.1"
