"""``wppack build [PROJECT_DIR]`` — run the packaging pipeline.

Prints one line per step as it finishes, then a summary panel with the
produced archives, the build file count and the overall status. Exits 1
when the build FAILED.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from wppack.core.orchestrator import BuildOrchestrator
from wppack.models.config import ConfigLoadError
from wppack.reporting.renderer import BuildRenderer

console = Console()


def build_cmd(
    project_dir: Path = typer.Argument(
        Path("."),
        help="Plugin checkout to build.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
) -> None:
    """Build the plugin and create the production and development archives."""
    try:
        orchestrator = BuildOrchestrator(project_dir)
    except ConfigLoadError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    renderer = BuildRenderer(console=console)
    ctx = orchestrator.prepare_context()
    renderer.print_header(ctx.config.plugin_name, ctx.version, ctx.version_source.value)
    console.print()

    summary = orchestrator.run(on_result=renderer.print_step_result)

    console.print()
    renderer.print_summary(summary)

    if summary.exit_code:
        raise typer.Exit(code=summary.exit_code)
