"""Synchronous external command invocation.

Every external tool (npm, composer, the task runner, WP-CLI, the validation
script) is run through a ``CommandRunner``. The default ``ProcessRunner``:

- blocks until the child exits and collects its exit code and output,
- starts the child in its own session so that a timeout kills the whole
  process tree, not just the direct child,
- optionally runs the child as a different user (``run_as``), used to keep
  root-owned files out of the build tree when invoked through sudo.

The OS-level spawn and effective-uid lookup are isolated in small functions so
tests can replace them.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import signal
import subprocess
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class ProcessError(RuntimeError):
    """Base class for command invocation failures."""


class CommandNotFoundError(ProcessError):
    """Raised when the executable does not exist."""


class CommandTimeoutError(ProcessError):
    """Raised when a command exceeds its timeout and has been killed."""


class CommandResult(BaseModel):
    """Exit status and merged output of a finished command."""

    model_config = ConfigDict(frozen=True)

    args: list[str]
    returncode: int
    output: str = ""
    duration_seconds: float = 0.0
    run_as: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(shlex.quote(a) for a in self.args)


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for command execution backends.

    Anything with a compatible ``run`` method can drive the pipeline; tests
    use an in-memory fake that simulates tool side effects.
    """

    def run(
        self,
        args: Sequence[str | Path],
        *,
        cwd: Path | None = None,
        run_as: str | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        ...


# ---------------------------------------------------------------------------
# Process identity
# ---------------------------------------------------------------------------


def effective_uid() -> int:
    """Return the effective uid, or -1 on platforms without one."""
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid else -1


def is_elevated() -> bool:
    """Whether the packager is running as root."""
    return effective_uid() == 0


def unprivileged_user(
    configured: str = "",
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Return the user that sub-invocations should drop to, if any.

    Only relevant while running as root: the configured user wins, then
    ``SUDO_USER``. Returns None when no privilege drop is needed.
    """
    if not is_elevated():
        return None
    environ = os.environ if environ is None else environ
    user = configured or environ.get("SUDO_USER", "")
    if not user or user == "root":
        return None
    return user


def chown_tree(path: Path, user: str) -> None:
    """Recursively hand *path* over to *user* (keeps the group unchanged)."""
    shutil.chown(path, user=user)
    for child in path.rglob("*"):
        shutil.chown(child, user=user)


# ---------------------------------------------------------------------------
# Spawning
# ---------------------------------------------------------------------------


def _spawn(args: list[str], **kwargs) -> subprocess.Popen:  # type: ignore[type-arg]
    """Start the child process. Kept separate so it can be patched in tests."""
    return subprocess.Popen(args, **kwargs)


def _kill_tree(proc: subprocess.Popen) -> None:  # type: ignore[type-arg]
    """Kill the child's whole process group."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError, AttributeError):
        proc.kill()


class ProcessRunner:
    """Runs commands with ``subprocess``, one at a time.

    Parameters
    ----------
    default_timeout:
        Timeout applied when ``run()`` is not given one. None disables it.
    """

    def __init__(self, default_timeout: float | None = None) -> None:
        self.default_timeout = default_timeout

    def run(
        self,
        args: Sequence[str | Path],
        *,
        cwd: Path | None = None,
        run_as: str | None = None,
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        """Run *args* to completion and return its result.

        Raises ``CommandNotFoundError`` if the executable is missing and
        ``CommandTimeoutError`` if it outlives the timeout. A non-zero exit
        status is *not* an exception; callers decide what it means.
        """
        argv = [str(a) for a in args]
        timeout = timeout if timeout is not None else self.default_timeout
        command_line = " ".join(shlex.quote(a) for a in argv)
        logger.info("$ %s%s", command_line, f"  (as {run_as})" if run_as else "")

        kwargs: dict = {
            "cwd": str(cwd) if cwd else None,
            "stdout": subprocess.PIPE,
            "stderr": subprocess.STDOUT,
            "stdin": subprocess.DEVNULL,
            "text": True,
            "errors": "replace",
            "start_new_session": True,
        }
        if env is not None:
            kwargs["env"] = {**os.environ, **env}
        if run_as:
            kwargs["user"] = run_as

        started = time.monotonic()
        try:
            proc = _spawn(argv, **kwargs)
        except FileNotFoundError as exc:
            raise CommandNotFoundError(f"command not found: {argv[0]}") from exc

        try:
            output, _ = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            _kill_tree(proc)
            proc.communicate()
            raise CommandTimeoutError(
                f"command timed out after {timeout:g}s: {command_line}"
            ) from exc

        duration = time.monotonic() - started
        for line in (output or "").splitlines():
            logger.debug("  %s", line)
        if proc.returncode != 0:
            logger.warning(
                "Command exited with code %d: %s", proc.returncode, command_line
            )

        return CommandResult(
            args=argv,
            returncode=proc.returncode,
            output=output or "",
            duration_seconds=duration,
            run_as=run_as,
        )
