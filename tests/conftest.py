"""Shared test fixtures for wppack."""

from __future__ import annotations

import json
import shutil
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

from wppack.core.process import CommandNotFoundError, CommandResult
from wppack.models.config import (
    DEFAULT_COMPONENT_DIRS,
    BuildConfig,
    BuildContext,
    ToolAvailability,
    VersionSource,
)

# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

# A handler receives (argv, cwd) and may return an exit code (None means 0).
Handler = Callable[[list[str], Path], "int | None"]


@dataclass
class FakeCall:
    args: list[str]
    cwd: Path | None
    run_as: str | None
    timeout: float | None

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


class FakeRunner:
    """In-memory ``CommandRunner`` that records calls and simulates tools.

    Handlers are matched by command-line prefix, most recently registered
    first. Executables listed in ``missing`` raise ``CommandNotFoundError``.
    Anything unmatched exits 0 without side effects.
    """

    def __init__(self) -> None:
        self.calls: list[FakeCall] = []
        self.missing: set[str] = set()
        self._handlers: list[tuple[str, Handler]] = []

    def on(self, prefix: str, handler: Handler | None = None, *, returncode: int = 0) -> None:
        def _default(argv: list[str], cwd: Path) -> int:
            return returncode

        self._handlers.insert(0, (prefix, handler or _default))

    def run(
        self,
        args: Sequence[str | Path],
        *,
        cwd: Path | None = None,
        run_as: str | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append(FakeCall(argv, cwd, run_as, timeout))
        if argv[0] in self.missing:
            raise CommandNotFoundError(f"command not found: {argv[0]}")

        line = " ".join(argv)
        returncode = 0
        for prefix, handler in self._handlers:
            if line.startswith(prefix):
                returncode = handler(argv, cwd or Path.cwd()) or 0
                break
        return CommandResult(args=argv, returncode=returncode, run_as=run_as)

    def commands(self) -> list[str]:
        return [c.command_line for c in self.calls]

    def ran(self, prefix: str) -> bool:
        return any(c.command_line.startswith(prefix) for c in self.calls)


# ---------------------------------------------------------------------------
# Simulated tool side effects
# ---------------------------------------------------------------------------


def grunt_build(argv: list[str], cwd: Path) -> int:
    """Pretend ``grunt build``: copy src/ into build/."""
    shutil.copytree(cwd / "src", cwd / "build", dirs_exist_ok=True)
    return 0


def wp_make_pot(argv: list[str], cwd: Path) -> int:
    """Pretend ``wp i18n make-pot SRC DEST ...``: write DEST."""
    Path(argv[4]).write_text('msgid ""\nmsgstr ""\n', encoding="utf-8")
    return 0


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Provide a FakeRunner with no handlers registered."""
    return FakeRunner()


@pytest.fixture
def make_which() -> Callable[..., Callable[[str], str | None]]:
    """Factory fixture: a ``shutil.which`` stand-in for a set of executables."""

    def _factory(*available: str) -> Callable[[str], str | None]:
        def _which(name: str) -> str | None:
            return f"/usr/bin/{name}" if name in available else None

        return _which

    return _factory


@pytest.fixture(autouse=True)
def _no_sudo_user(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's sudo/env settings out of the tests."""
    monkeypatch.delenv("SUDO_USER", raising=False)
    for name in ("WPPACK_LOG_LEVEL", "WPPACK_RUN_AS_USER", "WPPACK_STEP_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Project trees
# ---------------------------------------------------------------------------


PLUGIN_HEADER = """<?php
/**
 * Plugin Name: BuddyPress
 * Description: Community features for WordPress.
 * Version:     {version}
 * Text Domain: buddypress
 */
"""


@pytest.fixture
def make_plugin_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: lay out a BuddyPress-like checkout under tmp_path."""

    def _factory(
        name: str = "buddypress",
        manifest_version: str | None = "11.5.1",
        header_version: str | None = "11.5.1",
        components: Sequence[str] = DEFAULT_COMPONENT_DIRS,
        node_modules: bool = True,
        archiver_plugin: bool = False,
        php_vendor: bool = True,
        files: dict[str, str] | None = None,
    ) -> Path:
        root = tmp_path / name
        src = root / "src"
        src.mkdir(parents=True)

        if manifest_version is not None:
            manifest = {"name": name, "version": manifest_version}
            (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")

        loader = PLUGIN_HEADER.format(version=header_version or "")
        if header_version is None:
            loader = "".join(
                line for line in loader.splitlines(keepends=True) if "Version:" not in line
            )
        (src / "bp-loader.php").write_text(loader, encoding="utf-8")
        (src / "class-buddypress.php").write_text("<?php\nclass BuddyPress {}\n", encoding="utf-8")
        for component in components:
            (src / component).mkdir()
            (src / component / "index.php").write_text("<?php\n", encoding="utf-8")

        (root / "readme.txt").write_text("=== BuddyPress ===\n", encoding="utf-8")
        (root / "license.txt").write_text("GPLv2 or later\n", encoding="utf-8")

        if node_modules:
            (root / "node_modules" / "grunt").mkdir(parents=True)
            (root / "node_modules" / "grunt" / "package.json").write_text("{}", encoding="utf-8")
        if archiver_plugin:
            (root / "node_modules" / "grunt-contrib-compress").mkdir(parents=True)
        if php_vendor:
            (root / "vendor" / "bin").mkdir(parents=True)
            (root / "vendor" / "bin" / "phpcs").write_text("#!/bin/sh\n", encoding="utf-8")

        for relative, content in (files or {}).items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _factory


@pytest.fixture
def plugin_project(make_plugin_project: Callable[..., Path]) -> Path:
    """Convenience: a complete project with node_modules and vendor present."""
    return make_plugin_project()


@pytest.fixture
def make_context() -> Callable[..., BuildContext]:
    """Factory fixture: build a BuildContext for a project directory."""

    def _factory(
        project_root: Path,
        version: str = "11.5.1",
        config: BuildConfig | None = None,
        run_as_user: str | None = None,
        **tools: Any,
    ) -> BuildContext:
        return BuildContext(
            project_root=project_root,
            version=version,
            version_source=VersionSource.MANIFEST,
            tools=ToolAvailability(**tools),
            config=config or BuildConfig(),
            run_as_user=run_as_user,
        )

    return _factory
