"""Step 5 — Production archive.

Produces ``<slug>-<version>.zip`` from the build output.

The task runner's archive plugin is preferred. Its archive is only accepted
if every entry sits under the ``<slug>/`` folder; anything else (plugin
missing, task failed, non-conforming layout) falls back to archiving the
build directory directly, which always uses the ``<slug>/`` layout.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from wppack.core.archive_builder import build_archive, has_distribution_layout
from wppack.core.dependency_gate import archiver_plugin_installed
from wppack.core.hasher import file_sha256
from wppack.core.process import CommandRunner
from wppack.models.artifacts import Artifact, ArtifactKind
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep, StepError

logger = logging.getLogger(__name__)


def describe_artifact(ctx: BuildContext, kind: ArtifactKind, produced_by: str) -> Artifact:
    """Build the ``Artifact`` record for an archive that exists on disk."""
    path = (
        ctx.production_archive_path
        if kind == ArtifactKind.PRODUCTION
        else ctx.development_archive_path
    )
    return Artifact(
        path=path,
        kind=kind,
        version_tag=ctx.version,
        size_bytes=path.stat().st_size,
        sha256=file_sha256(path),
        top_level_folder=ctx.config.plugin_slug,
        produced_by=produced_by,
    )


class ProductionArchiveStep(BaseStep):
    """Step 5: delegated archive with direct-archive fallback."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "production_archive"

    @property
    def display_name(self) -> str:
        return "Production archive"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        if not archiver_plugin_installed(ctx.project_root, ctx.config):
            raise StepError(f"archiver plugin {ctx.config.archiver_plugin} is not installed")

        archive = ctx.production_archive_path
        self.run_command(ctx, runner, ctx.config.task_runner_args(ctx.config.archive_task))

        if not archive.is_file():
            raise StepError(f"task runner did not produce {archive.name}")
        if not has_distribution_layout(archive, ctx.config.plugin_slug):
            archive.unlink()
            raise StepError(
                f"{archive.name} does not nest its contents under {ctx.config.plugin_slug}/"
            )

        artifact = describe_artifact(ctx, ArtifactKind.PRODUCTION, "task_runner")
        return StepOutput(message=f"{archive.name} created by task runner", artifacts=[artifact])

    def fallback(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        logger.info("Creating ZIP file directly from %s", ctx.build_dir)
        build_archive(
            ctx.build_dir,
            ctx.production_archive_path,
            ctx.config.plugin_slug,
            ctx.config.production_excludes,
        )
        artifact = describe_artifact(ctx, ArtifactKind.PRODUCTION, "direct")
        return StepOutput(message=f"{artifact.path.name} created directly", artifacts=[artifact])
