"""Step 7 — Validation.

Checks the build output against the expected top-level entries and, when the
project ships one, runs the external ``validate-build.sh`` collaborator.

    external script absent     -> warning, built-in check still runs
    external script non-zero   -> warning
    required entry missing     -> warning (FAIL report, informational)
    optional entry missing     -> warning (WARNING report)
"""

from __future__ import annotations

import logging
from typing import ClassVar

from wppack.core.process import CommandRunner, ProcessError
from wppack.core.validation import validate_build
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.models.validation import ExternalCheck, ValidationStatus
from wppack.steps.base import BaseStep

logger = logging.getLogger(__name__)


class ValidationStep(BaseStep):
    """Step 7: validate the build output."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "validation"

    @property
    def display_name(self) -> str:
        return "Build validation"

    def run_external_check(self, ctx: BuildContext, runner: CommandRunner) -> ExternalCheck:
        script = ctx.project_root / ctx.config.validation_script
        name = ctx.config.validation_script.as_posix()
        if not script.is_file():
            return ExternalCheck(script=name)
        try:
            result = self.run_command(ctx, runner, ["bash", str(script)], check=False)
        except ProcessError as exc:
            logger.warning("Validation script could not run: %s", exc)
            return ExternalCheck(script=name)
        return ExternalCheck(
            script=name, ran=True, passed=result.ok, returncode=result.returncode
        )

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        warnings: list[str] = []

        external = self.run_external_check(ctx, runner)
        if not external.ran:
            warnings.append(f"validation script {external.script} not found; skipped")
        elif not external.passed:
            warnings.append(f"{external.script} reported problems (exit {external.returncode})")

        report = validate_build(ctx.build_dir, ctx.config, external_check=external)
        if report.status == ValidationStatus.FAIL:
            missing = ", ".join(report.missing_required)
            warnings.append(f"missing required build entries: {missing}")
        if report.missing_optional:
            warnings.append("missing optional entries: " + ", ".join(report.missing_optional))

        return StepOutput(
            message=f"{report.present_count}/{report.expected_count} expected entries present",
            warnings=warnings,
            report=report,
        )
