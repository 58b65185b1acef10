"""``wppack version [PROJECT_DIR]`` — print the version a build would use."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from wppack.core.version_resolver import resolve_version
from wppack.models.config import ConfigLoadError, load_build_config

console = Console()


def version_cmd(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Plugin checkout to inspect.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Print only the version string."
    ),
) -> None:
    """Resolve the plugin version without building anything."""
    try:
        config = load_build_config(project_dir)
    except ConfigLoadError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    resolved = resolve_version(project_dir, config)
    if quiet:
        console.print(resolved.version, highlight=False)
        return

    origin = f" ({resolved.origin})" if resolved.origin else ""
    console.print(
        f"[bold]{config.plugin_name}[/bold] {resolved.version} "
        f"[dim]from {resolved.source.value}{origin}[/dim]"
    )
