"""Rich terminal renderer for build transcripts.

Color scheme
------------
- green     : passed
- cyan      : fallback
- dim       : skipped
- yellow    : warning / PASSED WITH WARNINGS
- bold red  : failed / FAILED
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wppack.models.reports import BuildStatus, BuildSummary
from wppack.models.steps import StepOutcome, StepResult


# ---------------------------------------------------------------------------
# Outcome -> Rich style mapping
# ---------------------------------------------------------------------------

_OUTCOME_STYLES: dict[StepOutcome, str] = {
    StepOutcome.PASSED: "green",
    StepOutcome.FALLBACK: "cyan",
    StepOutcome.SKIPPED: "dim",
    StepOutcome.WARNING: "yellow",
    StepOutcome.FAILED: "bold red",
}

_OUTCOME_ICONS: dict[StepOutcome, str] = {
    StepOutcome.PASSED: "[green]PASSED[/green]",
    StepOutcome.FALLBACK: "[cyan]FALLBACK[/cyan]",
    StepOutcome.SKIPPED: "[dim]SKIPPED[/dim]",
    StepOutcome.WARNING: "[yellow]WARNING[/yellow]",
    StepOutcome.FAILED: "[bold red]FAILED[/bold red]",
}

_STATUS_STYLES: dict[BuildStatus, str] = {
    BuildStatus.PASSED: "bold green",
    BuildStatus.PASSED_WITH_WARNINGS: "bold yellow",
    BuildStatus.FAILED: "bold red",
}


def human_size(size_bytes: int) -> str:
    """Format a byte count the way ``du -h`` would (``1.4M``, ``512B``)."""
    size = float(size_bytes)
    for unit in ("B", "K", "M", "G"):
        if size < 1024 or unit == "G":
            if unit == "B":
                return f"{int(size)}B"
            return f"{size:.1f}{unit}"
        size /= 1024
    return f"{size:.1f}G"


class BuildRenderer:
    """Renders step results and the ``BuildSummary`` as Rich output.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    # ------------------------------------------------------------------
    # Live transcript
    # ------------------------------------------------------------------

    def print_header(self, plugin_name: str, version: str, source: str) -> None:
        self.console.print(
            f"[bold cyan]Building {plugin_name} {version}[/bold cyan] "
            f"[dim](version from {source})[/dim]"
        )

    def print_step_result(self, result: StepResult) -> None:
        """Print one finished step. Used as the executor's ``on_result`` hook."""
        icon = _OUTCOME_ICONS.get(result.outcome, result.outcome.value)
        line = f"  {icon} {result.display_name}"
        if result.message:
            line += f" [dim]- {result.message}[/dim]"
        self.console.print(line)

        if result.outcome == StepOutcome.FALLBACK and result.error:
            self.console.print(f"      [dim]primary failed: {result.error}[/dim]")
        elif result.outcome == StepOutcome.FAILED and result.error:
            self.console.print(f"      [red]{result.error}[/red]")
        for warning in result.warnings:
            self.console.print(f"      [yellow]! {warning}[/yellow]")

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def render_summary(self, summary: BuildSummary) -> Panel:
        """Render the end-of-run summary as a Panel containing a Table."""
        table = self._build_step_table(summary)
        parts: list[Text | Table] = [table, Text("")]

        for artifact in summary.artifacts:
            parts.append(
                Text.from_markup(
                    f"[bold]{artifact.kind.value.title()}:[/bold] {artifact.path} "
                    f"({human_size(artifact.size_bytes)})"
                )
            )
        parts.append(
            Text.from_markup(f"[bold]Total files in build:[/bold] {summary.total_files}")
        )

        if summary.validation is not None:
            report = summary.validation
            line = (
                f"[bold]Validation:[/bold] {report.status.value} "
                f"({report.present_count}/{report.expected_count} present)"
            )
            if report.missing_required:
                line += f"  [red]missing: {', '.join(report.missing_required)}[/red]"
            if report.missing_optional:
                line += f"  [yellow]optional missing: {', '.join(report.missing_optional)}[/yellow]"
            parts.append(Text.from_markup(line))

        if summary.aborted_at:
            parts.append(
                Text.from_markup(
                    f"[bold red]Aborted at {summary.aborted_at}:[/bold red] {summary.abort_reason}"
                )
            )

        style = _STATUS_STYLES.get(summary.status, "bold")
        parts.append(Text(""))
        parts.append(Text.from_markup(f"[{style}]Build {summary.status.value}[/{style}]"))

        return Panel(
            Group(*parts),
            title=f"[bold]{summary.plugin_slug} {summary.version}[/bold]",
            subtitle=f"Finished: {summary.finished_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            border_style=style.replace("bold ", ""),
            padding=(1, 2),
        )

    def _build_step_table(self, summary: BuildSummary) -> Table:
        table = Table(show_header=True, header_style="bold cyan", expand=True)
        table.add_column("#", style="dim", width=3, justify="right")
        table.add_column("Step", min_width=24)
        table.add_column("Outcome", min_width=10, justify="center")
        table.add_column("Details", min_width=20)
        table.add_column("Time", justify="right", width=8)

        for i, result in enumerate(summary.results):
            name_style = _OUTCOME_STYLES.get(result.outcome, "")
            details = result.message or "[dim]-[/dim]"
            if result.warnings:
                details += f" [yellow]({len(result.warnings)} warning(s))[/yellow]"
            table.add_row(
                str(i),
                f"[{name_style}]{result.display_name}[/{name_style}]",
                _OUTCOME_ICONS.get(result.outcome, result.outcome.value),
                details,
                f"{result.duration_seconds:.1f}s",
            )
        return table

    def print_summary(self, summary: BuildSummary) -> None:
        """Print the summary panel to the console."""
        self.console.print(self.render_summary(summary))
