"""Unit tests for build output validation."""

from __future__ import annotations

from pathlib import Path

from wppack.core.validation import build_validation_report, validate_build
from wppack.models.config import DEFAULT_COMPONENT_DIRS, BuildConfig
from wppack.models.validation import ExternalCheck, ValidationStatus


def _build(root: Path, files=("bp-loader.php", "class-buddypress.php"), dirs=DEFAULT_COMPONENT_DIRS) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for name in files:
        (root / name).write_text("<?php\n")
    for name in dirs:
        (root / name).mkdir()
    return root


class TestValidationStatus:
    def test_all_present_passes(self, tmp_path: Path):
        build = _build(tmp_path / "build", files=("bp-loader.php", "class-buddypress.php", "readme.txt", "buddypress.pot"))
        report = validate_build(build, BuildConfig())
        assert report.status == ValidationStatus.PASS
        assert report.missing_count == 0
        assert report.present_count == report.expected_count == 15

    def test_missing_required_file_fails(self, tmp_path: Path):
        build = _build(tmp_path / "build", files=("bp-loader.php",))
        report = validate_build(build, BuildConfig())
        assert report.status == ValidationStatus.FAIL
        assert report.missing_required == ["class-buddypress.php"]

    def test_missing_component_dir_fails(self, tmp_path: Path):
        dirs = [d for d in DEFAULT_COMPONENT_DIRS if d != "bp-groups"]
        report = validate_build(_build(tmp_path / "build", dirs=dirs), BuildConfig())
        assert report.status == ValidationStatus.FAIL
        assert "bp-groups" in report.missing_required

    def test_file_where_dir_expected_fails(self, tmp_path: Path):
        dirs = [d for d in DEFAULT_COMPONENT_DIRS if d != "bp-core"]
        build = _build(tmp_path / "build", dirs=dirs)
        (build / "bp-core").write_text("not a directory")
        assert validate_build(build, BuildConfig()).status == ValidationStatus.FAIL

    def test_missing_translation_template_is_warning(self, tmp_path: Path):
        build = _build(tmp_path / "build", files=("bp-loader.php", "class-buddypress.php", "readme.txt"))
        report = validate_build(build, BuildConfig())
        assert report.status == ValidationStatus.WARNING
        assert report.missing_optional == ["buddypress.pot"]
        assert report.missing_required == []

    def test_missing_build_dir_fails(self, tmp_path: Path):
        report = validate_build(tmp_path / "build", BuildConfig())
        assert report.status == ValidationStatus.FAIL
        assert report.present_count == 0

    def test_failed_external_check_is_warning(self, tmp_path: Path):
        build = _build(tmp_path / "build", files=("a.php",), dirs=())
        check = ExternalCheck(script="validate-build.sh", ran=True, passed=False, returncode=2)
        report = build_validation_report(build, ["a.php"], external_check=check)
        assert report.status == ValidationStatus.WARNING
        assert report.external_check == check

    def test_external_check_not_run_does_not_degrade(self, tmp_path: Path):
        build = _build(tmp_path / "build", files=("a.php",), dirs=())
        report = build_validation_report(
            build, ["a.php"], external_check=ExternalCheck(script="validate-build.sh")
        )
        assert report.status == ValidationStatus.PASS

    def test_report_does_not_touch_build(self, tmp_path: Path):
        build = _build(tmp_path / "build")
        before = sorted(p.name for p in build.iterdir())
        validate_build(build, BuildConfig())
        assert sorted(p.name for p in build.iterdir()) == before
