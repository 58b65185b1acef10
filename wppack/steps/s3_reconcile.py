"""Step 3 — Reconcile auxiliary files.

Copies files that belong in the distribution but that the task runner may
not have placed into the build output: the main plugin file, the readme and
the license. A file is copied only if the destination is absent, so the step
never overwrites task-runner output and re-running it never changes the
build listing.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import ClassVar

from wppack.core.process import CommandRunner
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep, StepError

logger = logging.getLogger(__name__)


def copy_if_absent(source: Path, destination: Path) -> bool:
    """Copy *source* to *destination* unless the destination already exists."""
    if not source.is_file() or destination.exists():
        return False
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)
    return True


class ReconcileFilesStep(BaseStep):
    """Step 3: ensure plugin file, readme and license are in the build."""

    required: ClassVar[bool] = False

    @property
    def step_id(self) -> str:
        return "reconcile"

    @property
    def display_name(self) -> str:
        return "Reconcile auxiliary files"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        if not ctx.build_dir.is_dir():
            raise StepError(f"build directory {ctx.build_dir} does not exist")

        copied: list[str] = []

        main_file = ctx.config.main_plugin_file
        if copy_if_absent(ctx.source_dir / main_file, ctx.build_dir / main_file):
            copied.append(main_file)

        # Only the first readme/license variant that exists at the root counts.
        for candidates in (ctx.config.readme_candidates, ctx.config.license_candidates):
            for name in candidates:
                source = ctx.project_root / name
                if not source.is_file():
                    continue
                if copy_if_absent(source, ctx.build_dir / name):
                    copied.append(name)
                break

        for name in copied:
            logger.info("Copied %s to %s/", name, ctx.config.build_dir.as_posix())
        return StepOutput(
            message="copied " + ", ".join(copied) if copied else "build output already complete"
        )
