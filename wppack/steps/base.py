"""Abstract base step for the packaging pipeline.

Every concrete step inherits from BaseStep and implements ``execute()``; it
may also implement ``fallback()``, the alternate strategy the executor tries
when ``execute()`` fails. The ``required`` flag decides what an unrecovered
failure means:

    required=True   -> the pipeline aborts with a non-zero exit
    required=False  -> the failure is logged as a warning, pipeline continues

Steps signal an intentional skip (optional tool absent) by raising
``StepSkipped`` and a failure by raising ``StepError`` (any other exception is
treated as a failure too).
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING, ClassVar

from wppack.models.steps import StepOutput

if TYPE_CHECKING:
    from wppack.core.process import CommandResult, CommandRunner
    from wppack.models.config import BuildContext
    from wppack.models.validation import ValidationReport

logger = logging.getLogger(__name__)


class StepError(RuntimeError):
    """Raised by a step whose action failed.

    May carry a validation *report* so that it survives into the summary
    even though the step failed.
    """

    def __init__(self, message: str, *, report: ValidationReport | None = None) -> None:
        super().__init__(message)
        self.report = report


class StepSkipped(Exception):
    """Raised by an optional step that cannot run (tool not available)."""


class BaseStep(abc.ABC):
    """Abstract base for all pipeline steps.

    Subclasses **must** implement:
        * ``step_id`` — unique identifier (e.g. ``"clean"``).
        * ``display_name`` — human-readable name for the transcript.
        * ``execute(ctx, runner)`` — the primary action.

    Subclasses **may** override:
        * ``required`` — set to ``False`` for best-effort steps.
        * ``fallback(ctx, runner)`` — alternate action on failure.
    """

    required: ClassVar[bool] = True

    @property
    @abc.abstractmethod
    def step_id(self) -> str:
        """Unique step identifier."""
        ...

    @property
    @abc.abstractmethod
    def display_name(self) -> str:
        """Human-readable display name."""
        ...

    @abc.abstractmethod
    def execute(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        """Run the step's primary action."""
        ...

    def fallback(self, ctx: BuildContext, runner: CommandRunner) -> StepOutput:
        """Alternate action, tried when ``execute()`` fails."""
        raise NotImplementedError

    @property
    def has_fallback(self) -> bool:
        return type(self).fallback is not BaseStep.fallback

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    @staticmethod
    def run_command(
        ctx: BuildContext,
        runner: CommandRunner,
        args: list[str],
        *,
        run_as: str | None = None,
        check: bool = True,
    ) -> CommandResult:
        """Run *args* in the project root with the context's timeout.

        With ``check=True`` a non-zero exit status raises ``StepError``.
        """
        result = runner.run(
            args, cwd=ctx.project_root, run_as=run_as, timeout=ctx.command_timeout
        )
        if check and not result.ok:
            raise StepError(
                f"`{result.command_line}` exited with code {result.returncode}"
            )
        return result

    def __repr__(self) -> str:
        flags = "" if self.required else " [optional]"
        if self.has_fallback:
            flags += " [fallback]"
        return f"<{type(self).__name__} step_id={self.step_id!r}{flags}>"
