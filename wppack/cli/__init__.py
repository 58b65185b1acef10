"""wppack CLI — Typer-based command-line interface.

Provides the ``wppack`` command with subcommands for building the release
archives of a plugin checkout and for printing the version a build would
use.

All output uses Rich for formatted terminal display.
"""
