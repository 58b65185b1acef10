"""Project configuration and per-run build context models."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

#: Optional project-level override file, looked up at the project root.
CONFIG_FILENAME = "wppack.json"

# The BuddyPress component directories shipped in every build.
DEFAULT_COMPONENT_DIRS: list[str] = [
    "bp-activity",
    "bp-blogs",
    "bp-core",
    "bp-friends",
    "bp-groups",
    "bp-members",
    "bp-messages",
    "bp-notifications",
    "bp-settings",
    "bp-templates",
    "bp-xprofile",
]


class BuildConfig(BaseModel):
    """Project-level conventions for the packaging pipeline.

    Defaults describe a BuddyPress checkout. Every field can be overridden by
    a ``wppack.json`` file at the project root (see ``load_build_config``).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    plugin_slug: str = "buddypress"
    plugin_name: str = "BuddyPress"

    # Layout, relative to the project root
    source_dir: Path = Path("src")
    build_dir: Path = Path("build")
    output_dir: Path = Path(".")

    # Version sources
    manifest_file: Path = Path("package.json")
    header_candidates: list[Path] = [Path("src/bp-loader.php"), Path("bp-loader.php")]
    fallback_version: str = "11.5.1"

    # Delegated task runner
    task_runner_command: list[str] = ["npx", "grunt"]
    gruntfile: Path | None = None
    build_tasks: list[str] = ["build"]
    archive_task: str = "compress:production"
    fallback_tasks: list[str] = ["clean:all", "copy:files", "uglify:core", "cssmin"]
    fallback_commands: list[list[str]] = [["npm", "run", "build"]]

    # Dependency probes
    node_modules_dir: Path = Path("node_modules")
    archiver_plugin: str = "grunt-contrib-compress"
    php_vendor_probe: Path = Path("vendor/bin/phpcs")

    # Translation extraction
    translation_tool_candidates: list[Path] = [
        Path("/Applications/Local.app/Contents/Resources/extraResources/bin/wp-cli/posix/wp"),
    ]
    translation_tool_name: str = "wp"
    translation_excludes: list[str] = ["node_modules", "vendor", "tests", "*.min.js", "*.min.css"]
    bugs_url: str = "https://buddypress.trac.wordpress.org"

    # Auxiliary files reconciled into the build output
    readme_candidates: list[str] = ["readme.txt", "README.md"]
    license_candidates: list[str] = ["license.txt", "LICENSE"]

    # Archive exclusions
    # A leading "/" anchors a pattern at the archived tree's root.
    production_excludes: list[str] = [".*", "Thumbs.db"]
    development_excludes: list[str] = [
        "/node_modules",
        "/build",
        "*.zip",
        ".git",
        ".svn",
        ".DS_Store",
        "Thumbs.db",
        "*.log",
    ]

    # Validation
    validation_script: Path = Path("validate-build.sh")
    required_files: list[str] = ["bp-loader.php", "class-buddypress.php"]
    required_dirs: list[str] = list(DEFAULT_COMPONENT_DIRS)
    optional_entries: list[str] = ["buddypress.pot", "readme.txt"]

    @property
    def main_plugin_file(self) -> str:
        """File name of the plugin header file (e.g. ``bp-loader.php``)."""
        return self.header_candidates[0].name

    @property
    def pot_filename(self) -> str:
        return f"{self.plugin_slug}.pot"

    @property
    def staging_dir(self) -> Path:
        """Scratch folder older packaging scripts left beside the archives."""
        return Path(f"{self.plugin_slug}-build-temp")

    def production_archive_name(self, version: str) -> str:
        return f"{self.plugin_slug}-{version}.zip"

    def development_archive_name(self, version: str) -> str:
        return f"{self.plugin_slug}-{version}-dev.zip"

    def task_runner_args(self, *tasks: str) -> list[str]:
        """Full command line for invoking the task runner with *tasks*."""
        args = list(self.task_runner_command)
        if self.gruntfile is not None:
            args += ["--gruntfile", str(self.gruntfile)]
        return args + list(tasks)


class ConfigLoadError(RuntimeError):
    """Raised when ``wppack.json`` exists but cannot be parsed."""


def load_build_config(project_root: Path) -> BuildConfig:
    """Load ``wppack.json`` from *project_root*, or return the defaults."""
    path = project_root / CONFIG_FILENAME
    if not path.is_file():
        return BuildConfig()
    try:
        config = BuildConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid {CONFIG_FILENAME}: {exc}") from exc
    logger.info("Loaded project configuration from %s", path)
    return config


class VersionSource(str, Enum):
    """Where the run's version string came from."""

    MANIFEST = "manifest"
    HEADER = "header"
    FALLBACK = "fallback"


class ToolAvailability(BaseModel):
    """Snapshot of external tools found by the dependency gate."""

    model_config = ConfigDict(frozen=True)

    node_modules: bool = False
    npm: bool = False
    task_runner: bool = False
    archiver_plugin: bool = False
    php_dependencies: bool = False
    composer: bool = False
    translation_tool: bool = False
    translation_tool_path: str | None = None
    validation_script: bool = False


class BuildContext(BaseModel):
    """Immutable per-run context handed to every pipeline step.

    Created once at pipeline start, after the version has been resolved and
    the tools probed. Steps read it and write only to their own outputs.
    """

    model_config = ConfigDict(frozen=True)

    project_root: Path
    version: str
    version_source: VersionSource
    tools: ToolAvailability
    config: BuildConfig = BuildConfig()
    run_as_user: str | None = None
    command_timeout: float | None = None

    @property
    def source_dir(self) -> Path:
        return self.project_root / self.config.source_dir

    @property
    def build_dir(self) -> Path:
        return self.project_root / self.config.build_dir

    @property
    def output_dir(self) -> Path:
        return self.project_root / self.config.output_dir

    @property
    def production_archive_path(self) -> Path:
        return self.output_dir / self.config.production_archive_name(self.version)

    @property
    def development_archive_path(self) -> Path:
        return self.output_dir / self.config.development_archive_name(self.version)
