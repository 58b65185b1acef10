"""Step 4 — Translation template.

Generates ``<slug>.pot`` in the build output with WP-CLI's
``i18n make-pot``. Best-effort: a missing WP-CLI skips the step and any
failure is downgraded to a warning by the executor.

When the packager runs as root (typically via sudo), WP-CLI is run as the
invoking user and the build tree is handed over to that user first, so the
build output is not left root-owned.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import ClassVar

from wppack.core import process
from wppack.core.process import CommandRunner
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep, StepError, StepSkipped

logger = logging.getLogger(__name__)

POT_MODE = 0o644


class TranslationTemplateStep(BaseStep):
    """Step 4: extract translatable strings into a POT file."""

    required: ClassVar[bool] = False

    @property
    def step_id(self) -> str:
        return "translations"

    @property
    def display_name(self) -> str:
        return "Translation template"

    def make_pot_args(self, ctx: BuildContext, destination: Path, *, full: bool = True) -> list[str]:
        """Build the ``wp i18n make-pot`` command line."""
        config = ctx.config
        args = [
            ctx.tools.translation_tool_path or config.translation_tool_name,
            "i18n",
            "make-pot",
            str(ctx.build_dir),
            str(destination),
            f"--slug={config.plugin_slug}",
            f"--domain={config.plugin_slug}",
        ]
        if full:
            headers = {
                "Project-Id-Version": f"{config.plugin_name} {ctx.version}",
                "Report-Msgid-Bugs-To": config.bugs_url,
            }
            args += [
                f"--exclude={','.join(config.translation_excludes)}",
                f"--headers={json.dumps(headers)}",
            ]
        return args

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        if not ctx.tools.translation_tool:
            raise StepSkipped("WP-CLI not found; skipping POT file generation")
        if not ctx.build_dir.is_dir():
            raise StepError(f"build directory {ctx.build_dir} does not exist")

        run_as = ctx.run_as_user
        if run_as:
            logger.info("Changing ownership of %s to %s", ctx.build_dir, run_as)
            process.chown_tree(ctx.build_dir, run_as)

        target = ctx.build_dir / ctx.config.pot_filename
        temp_pot = Path(tempfile.gettempdir()) / f"{ctx.config.plugin_slug}-{os.getpid()}.pot"
        temp_pot.unlink(missing_ok=True)

        # Generate into a temp location first, then move into the build.
        result = self.run_command(
            ctx, runner, self.make_pot_args(ctx, temp_pot), run_as=run_as, check=False
        )
        if temp_pot.is_file():
            shutil.move(str(temp_pot), target)
        else:
            logger.info("Temporary POT missing (exit %d); trying direct generation", result.returncode)
            self.run_command(
                ctx, runner, self.make_pot_args(ctx, target, full=False), run_as=run_as, check=False
            )

        if not target.is_file():
            raise StepError(
                "POT file generation failed; generate it manually with "
                f"`wp i18n make-pot {ctx.config.build_dir.as_posix()} "
                f"{ctx.config.build_dir.as_posix()}/{ctx.config.pot_filename}`"
            )

        target.chmod(POT_MODE)
        size = target.stat().st_size
        return StepOutput(message=f"generated {ctx.config.pot_filename} ({size} bytes)")
