"""Pipeline step outcome models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from wppack.models.artifacts import Artifact
from wppack.models.validation import ValidationReport


class StepOutcome(str, Enum):
    """How a single step ended.

    ``FALLBACK`` means the primary action failed but the alternate strategy
    succeeded. It is informational, not an error.
    """

    PASSED = "passed"
    FALLBACK = "fallback"
    SKIPPED = "skipped"
    WARNING = "warning"
    FAILED = "failed"


class StepOutput(BaseModel):
    """What a step's action hands back to the executor."""

    model_config = ConfigDict(frozen=True)

    message: str = ""
    warnings: list[str] = []
    artifacts: list[Artifact] = []
    report: ValidationReport | None = None


class StepResult(BaseModel):
    """Recorded outcome of one executed step, in pipeline order."""

    model_config = ConfigDict(frozen=True)

    step_id: str
    display_name: str
    outcome: StepOutcome
    message: str = ""
    warnings: list[str] = []
    artifacts: list[Artifact] = []
    report: ValidationReport | None = None
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.outcome != StepOutcome.FAILED
