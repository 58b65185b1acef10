"""Validation report models — output of the build validation step."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class ValidationStatus(str, Enum):
    """Outcome of checking the build output against the expected entries."""

    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"


class ExternalCheck(BaseModel):
    """Result of the optional ``validate-build.sh`` collaborator."""

    model_config = ConfigDict(frozen=True)

    script: str
    ran: bool = False
    passed: bool = False
    returncode: int | None = None


class ValidationReport(BaseModel):
    """Present/missing counts over the expected top-level build entries.

    Informational only: producing a report never alters any artifact.
    """

    model_config = ConfigDict(frozen=True)

    build_dir: Path
    present: list[str] = []
    missing_required: list[str] = []
    missing_optional: list[str] = []
    status: ValidationStatus = ValidationStatus.PASS
    external_check: ExternalCheck | None = None

    @property
    def present_count(self) -> int:
        return len(self.present)

    @property
    def missing_count(self) -> int:
        return len(self.missing_required) + len(self.missing_optional)

    @property
    def expected_count(self) -> int:
        return self.present_count + self.missing_count
