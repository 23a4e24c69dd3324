"""Output utilities for the CLI with clear intent.

user_output() is for human-facing progress and diagnostics (stderr);
machine_output() is for results a script may capture (stdout).
"""

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from sourceify.core.runner import RunSummary
from sourceify.core.synthesizer import (
    SynthesisError,
    SynthesisOutcome,
    SynthesisSkipped,
    SynthesisSuccess,
)


def user_output(message: str) -> None:
    click.echo(message, err=True)


def machine_output(message: str) -> None:
    click.echo(message)


def error_output(message: str) -> None:
    """Print message with the red "Error: " prefix."""
    user_output(click.style("Error: ", fg="red") + message)


def report_outcome(outcome: SynthesisOutcome) -> None:
    """Print one line describing how an artifact was handled."""
    if isinstance(outcome, SynthesisSkipped):
        user_output(f"{outcome.destination} already exists!")
    elif isinstance(outcome, SynthesisSuccess):
        user_output(
            click.style("Created ", fg="green") + f"{outcome.destination} ({outcome.strategy})"
        )
    elif isinstance(outcome, SynthesisError):
        error_output(outcome.message)


def format_run_summary(summary: RunSummary, *, dry_run: bool) -> Panel:
    """Format the end-of-run summary box.

    Example:
        >>> panel = format_run_summary(summary, dry_run=False)
        >>> Console(stderr=True).print(panel)
    """
    lines: list[Text] = []

    if dry_run:
        lines.append(Text(f"Missing sources: {len(summary.pending)}"))
        title = "Dry Run"
        style = "blue"
    else:
        lines.append(Text(f"Created: {len(summary.created)}", style="green"))
        lines.append(Text(f"Already present: {len(summary.skipped)}"))
        failed_style = "red" if summary.failed else ""
        lines.append(Text(f"Failed: {len(summary.failed)}", style=failed_style))
        for error in summary.failed:
            lines.append(Text(f"  {error.artifact} ({error.error_type})", style="red"))
        title = "Sourceify Complete" if summary.success else "Sourceify Finished With Errors"
        style = "green" if summary.success else "red"

    return Panel(Text("\n").join(lines), title=title, border_style=style, padding=(1, 2))


def print_run_summary(summary: RunSummary, *, dry_run: bool) -> None:
    Console(stderr=True).print(format_run_summary(summary, dry_run=dry_run))
