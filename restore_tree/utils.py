"""
Console helpers for the recovery tree tool.

Includes:
- Shared rich console
- Styled message helpers
- Report summary rendering
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

# Global console instance
console = Console()


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{escape(subtitle)}[/italic]", expand=False))


def print_section(title: str):
    console.print(f"\n[bold cyan]=== {title} ===[/bold cyan]")


def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {escape(msg)}")


def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {escape(msg)}")


def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {escape(msg)}")


def print_info(msg: str):
    console.print(f"[INFO] {msg}", markup=False)


def print_path_line(marker: str, label: str, path: str, detail: str = "", style: str = "red"):
    """
    Print one per-entry result line, e.g. ``✗ MISSING FILE: /x/y.txt``.

    The path is escaped so names containing brackets are printed verbatim,
    and the line is never wrapped so long paths stay intact when captured.
    """
    suffix = f" {escape(detail)}" if detail else ""
    console.print(f"  [{style}]{marker} {label}[/{style}] {escape(path)}{suffix}", soft_wrap=True)


def print_report_table(report, title: str = "Summary"):
    """Print a summary table of a reconciliation report."""
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta", justify="right")

    for label, value in report.summary_rows():
        table.add_row(label, str(value))

    console.print(table)


def configure_logging(debug: bool = False) -> None:
    """
    Route library log records through rich.

    Args:
        debug: Show debug-level diagnostics (decoded encoding, skipped entries).
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
