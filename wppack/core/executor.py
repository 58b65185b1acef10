"""Pipeline executor — runs the fixed, ordered list of steps.

For each step:

    execute -> (on failure) fallback -> (on failure) abort or warn

A ``StepSkipped`` raised by a step is recorded as SKIPPED and never triggers
the fallback. Results are collected in order; when a required step fails the
executor raises ``PipelineAbortedError`` carrying every result so far.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from wppack.core.process import CommandRunner
from wppack.models.config import BuildContext
from wppack.models.steps import StepOutcome, StepOutput, StepResult
from wppack.models.validation import ValidationReport
from wppack.steps.base import BaseStep, StepError, StepSkipped

logger = logging.getLogger(__name__)

ResultCallback = Callable[[StepResult], None]


class PipelineAbortedError(RuntimeError):
    """Raised when a required step fails and no fallback recovered it."""

    def __init__(self, step_id: str, reason: str, results: list[StepResult]) -> None:
        super().__init__(f"Pipeline aborted at {step_id}: {reason}")
        self.step_id = step_id
        self.reason = reason
        self.results = results


class PipelineExecutor:
    """Runs steps sequentially against an immutable ``BuildContext``.

    Parameters
    ----------
    steps:
        The ordered step list. Order is never changed by the executor.
    runner:
        Command runner handed to every step.
    on_result:
        Optional callback invoked with each ``StepResult`` as soon as the
        step finishes (used for the live transcript).
    """

    def __init__(
        self,
        steps: Sequence[BaseStep],
        runner: CommandRunner,
        on_result: ResultCallback | None = None,
    ) -> None:
        ids = [s.step_id for s in steps]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate step ids in pipeline: {ids}")
        self.steps = list(steps)
        self.runner = runner
        self.on_result = on_result

    def run(self, ctx: BuildContext) -> list[StepResult]:
        """Execute every step in order and return their results."""
        results: list[StepResult] = []
        for step in self.steps:
            result = self.run_step(step, ctx)
            results.append(result)
            if self.on_result is not None:
                self.on_result(result)
            if result.outcome == StepOutcome.FAILED:
                raise PipelineAbortedError(step.step_id, result.error or "", results)
        return results

    def run_step(self, step: BaseStep, ctx: BuildContext) -> StepResult:
        """Run one step, its fallback if needed, and classify the outcome."""
        logger.info("==> %s", step.display_name)
        started = time.monotonic()

        try:
            output = step.execute(ctx, self.runner)
        except StepSkipped as exc:
            logger.warning("%s skipped: %s", step.display_name, exc)
            return self._result(step, StepOutcome.SKIPPED, started, message=str(exc))
        except Exception as exc:
            logger.warning("%s failed: %s", step.display_name, exc)
            primary_error = exc
        else:
            outcome = StepOutcome.WARNING if output.warnings else StepOutcome.PASSED
            return self._result(step, outcome, started, output=output)

        error: Exception = primary_error
        if step.has_fallback:
            logger.info("%s: trying fallback", step.display_name)
            try:
                output = step.fallback(ctx, self.runner)
            except Exception as exc:
                logger.warning("%s fallback failed: %s", step.display_name, exc)
                error = exc
            else:
                return self._result(
                    step,
                    StepOutcome.FALLBACK,
                    started,
                    output=output,
                    error=str(primary_error),
                )

        report = error.report if isinstance(error, StepError) else None
        if step.required:
            logger.error("%s failed: %s", step.display_name, error)
            return self._result(
                step, StepOutcome.FAILED, started, error=str(error), report=report
            )

        logger.warning("%s failed (optional, continuing): %s", step.display_name, error)
        return self._result(
            step,
            StepOutcome.WARNING,
            started,
            error=str(error),
            report=report,
            warnings=[str(error)],
        )

    @staticmethod
    def _result(
        step: BaseStep,
        outcome: StepOutcome,
        started: float,
        *,
        output: StepOutput | None = None,
        message: str = "",
        error: str | None = None,
        report: ValidationReport | None = None,
        warnings: list[str] | None = None,
    ) -> StepResult:
        output = output or StepOutput()
        return StepResult(
            step_id=step.step_id,
            display_name=step.display_name,
            outcome=outcome,
            message=message or output.message or (error or ""),
            warnings=list(output.warnings) + (warnings or []),
            artifacts=output.artifacts,
            report=output.report or report,
            error=error,
            duration_seconds=time.monotonic() - started,
        )
