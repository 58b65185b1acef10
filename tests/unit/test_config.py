"""Tests for runtime settings and project build configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from wppack.config import PackagerSettings
from wppack.models.config import (
    CONFIG_FILENAME,
    DEFAULT_COMPONENT_DIRS,
    BuildConfig,
    ConfigLoadError,
    load_build_config,
)


class TestPackagerSettings:
    def test_defaults(self):
        settings = PackagerSettings()
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.run_as_user == ""
        assert settings.timeout == 900.0

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("WPPACK_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("WPPACK_RUN_AS_USER", "builder")
        monkeypatch.setenv("WPPACK_STEP_TIMEOUT_SECONDS", "60")
        settings = PackagerSettings()
        assert settings.log_level == "DEBUG"
        assert settings.run_as_user == "builder"
        assert settings.timeout == 60.0

    @pytest.mark.parametrize("value", [0, None])
    def test_timeout_disabled(self, value):
        assert PackagerSettings(step_timeout_seconds=value).timeout is None


class TestBuildConfig:
    def test_defaults_describe_buddypress(self):
        config = BuildConfig()
        assert config.plugin_slug == "buddypress"
        assert config.main_plugin_file == "bp-loader.php"
        assert config.pot_filename == "buddypress.pot"
        assert config.required_dirs == DEFAULT_COMPONENT_DIRS
        assert len(config.required_dirs) == 11

    def test_archive_names_share_version(self):
        config = BuildConfig(plugin_slug="plugin")
        assert config.production_archive_name("11.5.1") == "plugin-11.5.1.zip"
        assert config.development_archive_name("11.5.1") == "plugin-11.5.1-dev.zip"

    def test_task_runner_args(self):
        assert BuildConfig().task_runner_args("build") == ["npx", "grunt", "build"]
        config = BuildConfig(gruntfile=Path("Gruntfile-enhanced.js"))
        assert config.task_runner_args("version") == [
            "npx", "grunt", "--gruntfile", "Gruntfile-enhanced.js", "version",
        ]

    def test_frozen(self):
        config = BuildConfig()
        with pytest.raises(Exception):
            config.plugin_slug = "other"  # type: ignore[misc]


class TestLoadBuildConfig:
    def test_defaults_without_file(self, tmp_path: Path):
        assert load_build_config(tmp_path) == BuildConfig()

    def test_overrides_from_file(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(
            '{"plugin_slug": "my-plugin", "build_dir": "dist", "required_dirs": []}'
        )
        config = load_build_config(tmp_path)
        assert config.plugin_slug == "my-plugin"
        assert config.build_dir == Path("dist")
        assert config.required_dirs == []

    def test_unknown_key_rejected(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('{"plugin_slugg": "typo"}')
        with pytest.raises(ConfigLoadError):
            load_build_config(tmp_path)

    def test_malformed_json_rejected(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("{")
        with pytest.raises(ConfigLoadError):
            load_build_config(tmp_path)
