"""Runtime configuration — env-driven.

Centralized settings using pydantic-settings. Reads from a .env file and
WPPACK_* environment variables. Project layout conventions (slug, directory
names, exclusion globs) live in ``wppack.models.config.BuildConfig`` instead;
these settings only govern how the packager itself behaves.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class PackagerSettings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export WPPACK_LOG_LEVEL=DEBUG
        export WPPACK_STEP_TIMEOUT_SECONDS=600
        export WPPACK_RUN_AS_USER=builder

    Or via .env file::

        WPPACK_LOG_LEVEL=WARNING
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="WPPACK_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"
    debug: bool = False

    # Per-command timeout. None or 0 disables it.
    step_timeout_seconds: float | None = 900.0

    # User that unprivileged sub-invocations (POT generation) run as when
    # the packager itself runs as root. Empty means "use SUDO_USER".
    run_as_user: str = ""

    @property
    def timeout(self) -> float | None:
        """The effective per-command timeout."""
        if not self.step_timeout_seconds:
            return None
        return self.step_timeout_seconds
