"""wppack: build and package a WordPress plugin into release archives.

Runs the plugin's own build through its task runner, falls back to direct
file operations whenever the task runner is missing or fails, and always
ends with a versioned production ZIP, a versioned development ZIP and a
validation report.
"""

__version__ = "0.2.0"

from wppack.core.orchestrator import BuildOrchestrator
from wppack.cli.app import app as cli

__all__ = ["BuildOrchestrator", "cli", "__version__"]
