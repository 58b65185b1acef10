"""Build summary model — the final report of a pipeline run."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from wppack.models.artifacts import Artifact, ArtifactKind
from wppack.models.steps import StepOutcome, StepResult
from wppack.models.validation import ValidationReport


class BuildStatus(str, Enum):
    """Overall verdict printed at the end of the transcript."""

    PASSED = "PASSED"
    PASSED_WITH_WARNINGS = "PASSED WITH WARNINGS"
    FAILED = "FAILED"


class BuildSummary(BaseModel):
    """Aggregate of one pipeline run. Computed for display, never persisted."""

    model_config = ConfigDict(frozen=True)

    plugin_slug: str
    version: str
    status: BuildStatus
    results: list[StepResult] = []
    artifacts: list[Artifact] = []
    build_dir: Path
    total_files: int = 0
    build_listing_hash: str = ""
    validation: ValidationReport | None = None
    aborted_at: str | None = None
    abort_reason: str | None = None
    finished_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def succeeded(self) -> bool:
        return self.status != BuildStatus.FAILED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    @property
    def warning_steps(self) -> list[StepResult]:
        """Steps that were skipped or degraded."""
        return [
            r for r in self.results
            if r.outcome in (StepOutcome.WARNING, StepOutcome.SKIPPED)
        ]

    def artifact(self, kind: ArtifactKind) -> Artifact | None:
        for artifact in self.artifacts:
            if artifact.kind == kind:
                return artifact
        return None
