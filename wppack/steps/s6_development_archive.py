"""Step 6 — Development archive.

Archives the project source itself as ``<slug>-<version>-dev.zip``, always
directly. The root dependency cache and build output, existing archives, VCS
directories and OS metadata files are excluded. Nested directories that
happen to be named ``build`` or ``node_modules`` are source and are kept.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from wppack.core.archive_builder import build_archive
from wppack.core.process import CommandRunner
from wppack.models.artifacts import ArtifactKind
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep
from wppack.steps.s5_production_archive import describe_artifact

logger = logging.getLogger(__name__)


class DevelopmentArchiveStep(BaseStep):
    """Step 6: direct archive of the source tree."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "development_archive"

    @property
    def display_name(self) -> str:
        return "Development archive"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        config = ctx.config
        excludes = list(config.development_excludes)
        # Always exclude the configured dependency cache, build output and
        # staging folder at the project root, whatever they are called.
        for directory in (config.node_modules_dir, config.build_dir, config.staging_dir):
            pattern = "/" + directory.as_posix()
            if pattern not in excludes:
                excludes.append(pattern)

        build_archive(
            ctx.project_root,
            ctx.development_archive_path,
            config.plugin_slug,
            excludes,
        )
        artifact = describe_artifact(ctx, ArtifactKind.DEVELOPMENT, "direct")
        return StepOutput(message=f"{artifact.path.name} created", artifacts=[artifact])
