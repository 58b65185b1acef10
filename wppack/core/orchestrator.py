"""Build orchestrator — the central coordinator for a packaging run.

The orchestrator:

    1. loads the project conventions (``BuildConfig``),
    2. resolves the plugin version exactly once,
    3. probes the external tools once,
    4. freezes both into a ``BuildContext``,
    5. runs the fixed step list through the ``PipelineExecutor``,
    6. condenses the results into a ``BuildSummary``.

Step failures never escape ``run()``: an aborted pipeline is reported as a
FAILED summary so the caller always gets a complete transcript.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Sequence
from pathlib import Path

from wppack.config import PackagerSettings
from wppack.core.dependency_gate import Which, probe_tools
from wppack.core.executor import PipelineAbortedError, PipelineExecutor, ResultCallback
from wppack.core.hasher import listing_hash, tree_listing
from wppack.core.process import CommandRunner, ProcessRunner, unprivileged_user
from wppack.core.version_resolver import ResolvedVersion, resolve_version
from wppack.models.artifacts import Artifact
from wppack.models.config import BuildConfig, BuildContext, load_build_config
from wppack.models.reports import BuildStatus, BuildSummary
from wppack.models.steps import StepOutcome, StepResult
from wppack.models.validation import ValidationReport, ValidationStatus
from wppack.steps import BaseStep, default_pipeline

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """Runs the packaging pipeline for one project directory.

    Parameters
    ----------
    project_root:
        The plugin checkout to build.
    config:
        Project conventions. Loaded from ``wppack.json`` (or defaults) if
        not provided.
    settings:
        Runtime settings. Read from the environment if not provided.
    runner:
        Command runner for external tools. A ``ProcessRunner`` honouring the
        configured timeout is used if not provided.
    steps:
        Step list override, in execution order. Defaults to the fixed
        pipeline.
    which:
        PATH lookup used by the dependency gate.
    """

    def __init__(
        self,
        project_root: Path,
        config: BuildConfig | None = None,
        *,
        settings: PackagerSettings | None = None,
        runner: CommandRunner | None = None,
        steps: Sequence[BaseStep] | None = None,
        which: Which = shutil.which,
    ) -> None:
        self.project_root = project_root.resolve()
        self.config = config or load_build_config(self.project_root)
        self.settings = settings or PackagerSettings()
        self.runner = runner or ProcessRunner(default_timeout=self.settings.timeout)
        self.steps = list(steps) if steps is not None else default_pipeline()
        self._which = which
        self._context: BuildContext | None = None

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def resolve_version(self) -> ResolvedVersion:
        return resolve_version(self.project_root, self.config)

    def prepare_context(self) -> BuildContext:
        """Resolve version and tools once; later calls return the same context."""
        if self._context is not None:
            return self._context

        resolved = self.resolve_version()
        tools = probe_tools(self.project_root, self.config, which=self._which)
        self._context = BuildContext(
            project_root=self.project_root,
            version=resolved.version,
            version_source=resolved.source,
            tools=tools,
            config=self.config,
            run_as_user=unprivileged_user(self.settings.run_as_user),
            command_timeout=self.settings.timeout,
        )
        logger.info(
            "Building %s version %s (from %s)",
            self.config.plugin_name,
            resolved.version,
            resolved.source.value,
        )
        return self._context

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, on_result: ResultCallback | None = None) -> BuildSummary:
        """Execute the pipeline and return the summary. Never raises for step failures."""
        ctx = self.prepare_context()
        executor = PipelineExecutor(self.steps, self.runner, on_result=on_result)

        aborted: PipelineAbortedError | None = None
        try:
            results = executor.run(ctx)
        except PipelineAbortedError as exc:
            logger.error("%s", exc)
            aborted = exc
            results = exc.results

        return self.summarize(ctx, results, aborted)

    def summarize(
        self,
        ctx: BuildContext,
        results: list[StepResult],
        aborted: PipelineAbortedError | None = None,
    ) -> BuildSummary:
        """Condense step results into the final ``BuildSummary``."""
        artifacts: list[Artifact] = [a for r in results for a in r.artifacts]
        validation: ValidationReport | None = next(
            (r.report for r in reversed(results) if r.report is not None), None
        )
        listing = tree_listing(ctx.build_dir)

        return BuildSummary(
            plugin_slug=ctx.config.plugin_slug,
            version=ctx.version,
            status=overall_status(results, validation, aborted is not None),
            results=results,
            artifacts=artifacts,
            build_dir=ctx.build_dir,
            total_files=len(listing),
            build_listing_hash=listing_hash(listing),
            validation=validation,
            aborted_at=aborted.step_id if aborted else None,
            abort_reason=aborted.reason if aborted else None,
        )


def overall_status(
    results: list[StepResult],
    validation: ValidationReport | None,
    aborted: bool,
) -> BuildStatus:
    """FAILED if aborted; PASSED WITH WARNINGS if anything degraded; else PASSED.

    A validation report never fails the run on its own: a FAIL report only
    degrades it.
    """
    if aborted or any(r.outcome == StepOutcome.FAILED for r in results):
        return BuildStatus.FAILED
    degraded = any(
        r.outcome in (StepOutcome.WARNING, StepOutcome.SKIPPED) or r.warnings
        for r in results
    )
    if degraded or (validation is not None and validation.status != ValidationStatus.PASS):
        return BuildStatus.PASSED_WITH_WARNINGS
    return BuildStatus.PASSED
