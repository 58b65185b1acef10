"""Main Typer application — imports and registers all CLI commands.

Entry point: ``wppack`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from wppack.cli.commands.build import build_cmd
from wppack.cli.commands.version import version_cmd
from wppack.config import PackagerSettings

app = typer.Typer(
    name="wppack",
    help="wppack: build and package a WordPress plugin into release archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="build", help="Run the packaging pipeline.")(build_cmd)
app.command(name="version", help="Print the version a build would use.")(version_cmd)


def configure_logging(settings: PackagerSettings, verbose: bool = False) -> None:
    """Route library logging through a RichHandler at the configured level."""
    level = "DEBUG" if verbose or settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=settings.debug, show_path=False)],
        force=True,
    )


@app.callback()
def _root(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every external command and its output."
    ),
) -> None:
    configure_logging(PackagerSettings(), verbose=verbose)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
