"""Step 1 — Clean.

Removes the previous build output, a stale ``<slug>-build-temp/`` staging
folder and any archives left over from earlier runs (``<slug>-*.zip`` and
interrupted ``.partial`` files).
"""

from __future__ import annotations

import logging
import shutil
from typing import ClassVar

from wppack.core.process import CommandRunner
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep

logger = logging.getLogger(__name__)


class CleanStep(BaseStep):
    """Step 1: remove prior build output and archives."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "clean"

    @property
    def display_name(self) -> str:
        return "Clean workspace"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        removed: list[str] = []

        for directory in (ctx.config.build_dir, ctx.config.staging_dir):
            path = ctx.project_root / directory
            if path.exists():
                shutil.rmtree(path)
                removed.append(f"{directory.as_posix()}/")

        slug = ctx.config.plugin_slug
        for pattern in (f"{slug}-*.zip", f"{slug}-*.zip.partial"):
            for archive in sorted(ctx.output_dir.glob(pattern)):
                archive.unlink()
                removed.append(archive.name)

        for item in removed:
            logger.info("Removed %s", item)
        return StepOutput(
            message=f"removed {len(removed)} item(s)" if removed else "nothing to clean"
        )
