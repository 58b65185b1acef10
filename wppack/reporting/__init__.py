"""wppack reporting — terminal transcript and end-of-run summary.

Modules
-------
renderer
    ``BuildRenderer`` prints one line per finished step while the pipeline
    runs, then turns the ``BuildSummary`` into a Rich Panel with the
    produced artifacts, their sizes, the build file count and the overall
    status.
"""

from wppack.reporting.renderer import BuildRenderer, human_size

__all__ = ["BuildRenderer", "human_size"]
