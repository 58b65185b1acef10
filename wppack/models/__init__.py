"""wppack data models — all Pydantic v2, all frozen (immutable)."""

from wppack.models.artifacts import Artifact, ArtifactKind
from wppack.models.config import (
    BuildConfig,
    BuildContext,
    ToolAvailability,
    VersionSource,
    load_build_config,
)
from wppack.models.reports import BuildStatus, BuildSummary
from wppack.models.steps import StepOutcome, StepOutput, StepResult
from wppack.models.validation import ExternalCheck, ValidationReport, ValidationStatus

__all__ = [
    # artifacts
    "Artifact",
    "ArtifactKind",
    # config
    "BuildConfig",
    "BuildContext",
    "ToolAvailability",
    "VersionSource",
    "load_build_config",
    # steps
    "StepOutcome",
    "StepOutput",
    "StepResult",
    # validation
    "ExternalCheck",
    "ValidationReport",
    "ValidationStatus",
    # reports
    "BuildStatus",
    "BuildSummary",
]
