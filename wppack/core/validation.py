"""Build output validation.

Checks the top-level entries of the build directory against the expected
required files, required component directories and optional items. The
report is informational and never modifies the build output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from wppack.models.config import BuildConfig
from wppack.models.validation import ExternalCheck, ValidationReport, ValidationStatus

logger = logging.getLogger(__name__)


def build_validation_report(
    build_dir: Path,
    required_files: Sequence[str],
    required_dirs: Sequence[str] = (),
    optional_entries: Sequence[str] = (),
    external_check: ExternalCheck | None = None,
) -> ValidationReport:
    """Compare *build_dir* against the expected entries.

    Status is FAIL if and only if a required file or directory is missing,
    WARNING if only optional entries are missing or the external check
    reported problems, PASS otherwise.
    """
    present: list[str] = []
    missing_required: list[str] = []
    missing_optional: list[str] = []

    for name in required_files:
        (present if (build_dir / name).is_file() else missing_required).append(name)
    for name in required_dirs:
        (present if (build_dir / name).is_dir() else missing_required).append(name)
    for name in optional_entries:
        (present if (build_dir / name).exists() else missing_optional).append(name)

    external_failed = (
        external_check is not None and external_check.ran and not external_check.passed
    )
    if missing_required:
        status = ValidationStatus.FAIL
    elif missing_optional or external_failed:
        status = ValidationStatus.WARNING
    else:
        status = ValidationStatus.PASS

    logger.info(
        "Validation of %s: %d present, %d missing -> %s",
        build_dir,
        len(present),
        len(missing_required) + len(missing_optional),
        status.value,
    )
    return ValidationReport(
        build_dir=build_dir,
        present=present,
        missing_required=missing_required,
        missing_optional=missing_optional,
        status=status,
        external_check=external_check,
    )


def validate_build(
    build_dir: Path,
    config: BuildConfig,
    external_check: ExternalCheck | None = None,
) -> ValidationReport:
    """``build_validation_report`` with the expectations from *config*."""
    return build_validation_report(
        build_dir,
        required_files=config.required_files,
        required_dirs=config.required_dirs,
        optional_entries=config.optional_entries,
        external_check=external_check,
    )
