"""Step 2 — Task runner build.

Delegates minification, linting and sub-component builds to the project's
task runner (Grunt by default) and checks that it left a non-empty build
directory behind.

Fallback, in order:
    1. run the individual fallback tasks and commands (best-effort, failures
       are logged and ignored),
    2. if the build directory is still missing or empty, copy the raw source
       tree into it.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import ClassVar

from wppack.core.process import CommandRunner, ProcessError
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep, StepError

logger = logging.getLogger(__name__)


def has_build_output(build_dir: Path) -> bool:
    """Whether *build_dir* exists and contains at least one entry."""
    return build_dir.is_dir() and any(build_dir.iterdir())


class TaskRunnerBuildStep(BaseStep):
    """Step 2: delegated build with degraded reconstruction fallback."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "task_runner_build"

    @property
    def display_name(self) -> str:
        return "Task runner build"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        args = ctx.config.task_runner_args(*ctx.config.build_tasks)
        self.run_command(ctx, runner, args)

        if not has_build_output(ctx.build_dir):
            raise StepError(
                f"task runner finished but {ctx.config.build_dir.as_posix()}/ is missing or empty"
            )
        return StepOutput(message=f"built with `{' '.join(args)}`")

    def fallback(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        warnings: list[str] = []

        commands = [ctx.config.task_runner_args(task) for task in ctx.config.fallback_tasks]
        commands += [list(cmd) for cmd in ctx.config.fallback_commands]
        for args in commands:
            try:
                result = self.run_command(ctx, runner, args, check=False)
            except ProcessError as exc:
                logger.warning("Fallback command failed: %s", exc)
                continue
            if not result.ok:
                logger.warning("Fallback command `%s` exited with %d", result.command_line, result.returncode)

        if has_build_output(ctx.build_dir):
            return StepOutput(message="rebuilt with individual fallback tasks")

        if not ctx.source_dir.is_dir():
            raise StepError(
                f"no build output and no source directory at {ctx.source_dir} to rebuild from"
            )

        logger.warning("Creating build from source directory...")
        shutil.copytree(ctx.source_dir, ctx.build_dir, dirs_exist_ok=True)
        if not has_build_output(ctx.build_dir):
            raise StepError(f"source directory {ctx.source_dir} is empty")

        warnings.append(
            f"build output reconstructed by copying {ctx.config.source_dir.as_posix()}/ verbatim "
            "(assets are not minified)"
        )
        return StepOutput(
            message=f"copied {ctx.config.source_dir.as_posix()}/ into {ctx.config.build_dir.as_posix()}/",
            warnings=warnings,
        )
