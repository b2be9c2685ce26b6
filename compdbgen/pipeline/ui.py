"""Central UI handler for compdbgen.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from compdbgen.pipeline.ui import console, print_header, print_error

    console.print("[success]Database written[/success]")
    print_header("SUMMARY")
"""

import sys

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

COMPDBGEN_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=COMPDBGEN_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")


def render_summary(report) -> Table:
    """Build the end-of-run summary table for a RunReport."""
    stats = report.pipeline.stats
    index = report.index.index

    table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("Metric", style="cmd")
    table.add_column("Value", justify="right")

    table.add_row("Directories indexed", str(report.index.stats["directories"]))
    table.add_row("Files indexed", str(report.index.stats["files"]))
    table.add_row("Unique file names", str(index.unique_count()))
    table.add_row("Ambiguous file names", str(len(index.ambiguous_names())))
    table.add_row("Log lines scanned", str(stats.lines_read))
    table.add_row("Compiler lines matched", str(stats.lines_matched))
    table.add_row("Records written", str(stats.records))
    table.add_row("Diagnostics", str(report.total_diagnostics))
    return table
