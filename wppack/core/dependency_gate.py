"""Dependency gate — non-destructive probing for external tools.

Tools are detected by filesystem and PATH lookups only; nothing is executed
here. The dependencies step decides which absences are fatal.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from wppack.models.config import BuildConfig, ToolAvailability

logger = logging.getLogger(__name__)

Which = Callable[[str], "str | None"]


def archiver_plugin_installed(project_root: Path, config: BuildConfig) -> bool:
    """Whether the task runner's archive plugin is present under node_modules.

    Re-probes the filesystem on every call so that a plugin installed earlier
    in the same run is picked up.
    """
    return (project_root / config.node_modules_dir / config.archiver_plugin).is_dir()


def find_translation_tool(config: BuildConfig, which: Which = shutil.which) -> str | None:
    """Locate WP-CLI: configured absolute candidates first, then PATH."""
    for candidate in config.translation_tool_candidates:
        if candidate.is_file():
            return str(candidate)
    return which(config.translation_tool_name)


def probe_tools(
    project_root: Path,
    config: BuildConfig | None = None,
    which: Which = shutil.which,
) -> ToolAvailability:
    """Probe *project_root* and PATH for every optional collaborator."""
    config = config or BuildConfig()
    node_modules = (project_root / config.node_modules_dir).is_dir()
    runner_executable = config.task_runner_command[0] if config.task_runner_command else ""
    translation_tool = find_translation_tool(config, which)

    tools = ToolAvailability(
        node_modules=node_modules,
        npm=which("npm") is not None,
        task_runner=bool(runner_executable) and which(runner_executable) is not None,
        archiver_plugin=archiver_plugin_installed(project_root, config),
        php_dependencies=(project_root / config.php_vendor_probe).is_file(),
        composer=which("composer") is not None,
        translation_tool=translation_tool is not None,
        translation_tool_path=translation_tool,
        validation_script=(project_root / config.validation_script).is_file(),
    )
    logger.debug("Tool availability: %s", tools.model_dump())
    return tools
