"""Step 0 — Dependencies.

Makes sure the tools the primary build path needs are installed:

    - Node dependencies: ``npm install`` when ``node_modules`` is missing.
    - PHP dependencies: ``composer install`` when the vendor tree is missing.

A missing package manager for either is fatal and reported with the command
the user needs to fix it. Nothing is installed when the dependencies are
already present, so re-running is a no-op.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from wppack.core.process import CommandRunner
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutput
from wppack.steps.base import BaseStep, StepError

logger = logging.getLogger(__name__)


class DependencyError(StepError):
    """A tool required by the primary build path is not installed."""


NPM_GUIDANCE = (
    "npm not found. Install Node.js (which ships npm) to run the build: "
    "https://nodejs.org/en/download"
)

COMPOSER_GUIDANCE = (
    "Composer not found. Install Composer to run the complete build process: "
    "`brew install composer` (macOS) or see https://getcomposer.org/download/"
)


class DependenciesStep(BaseStep):
    """Step 0: install or verify Node and PHP dependencies."""

    required: ClassVar[bool] = True

    @property
    def step_id(self) -> str:
        return "dependencies"

    @property
    def display_name(self) -> str:
        return "Dependencies"

    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        actions: list[str] = []

        # --- Node ------------------------------------------------------
        if ctx.tools.node_modules:
            logger.info("Node dependencies already installed.")
        elif not ctx.tools.npm:
            raise DependencyError(NPM_GUIDANCE)
        else:
            logger.info("Installing npm dependencies...")
            self.run_command(ctx, runner, ["npm", "install"])
            actions.append("npm install")

        # --- PHP -------------------------------------------------------
        if ctx.tools.php_dependencies:
            logger.info("PHP dependencies found.")
        elif not ctx.tools.composer:
            raise DependencyError(COMPOSER_GUIDANCE)
        else:
            logger.info("Composer found. Installing PHP dependencies...")
            self.run_command(ctx, runner, ["composer", "install"])
            actions.append("composer install")

        message = "ran " + ", ".join(actions) if actions else "all dependencies present"
        return StepOutput(message=message)
