"""Rich terminal display for nmsweep."""

from typing import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from nmsweep.models import CleanupReport, CleanupResult, ScanResult
from nmsweep.scanner import format_size

console = Console()

# Errors and log records; keeps stdout clean for --json
err_console = Console(stderr=True)


def show_scan_result(
    result: ScanResult,
    root: str,
    selected: set[str] | None = None,
) -> None:
    """Display scan matches, largest first.

    With ``selected`` given, rows are numbered and marked so the user can
    refer to them by index.
    """
    if not result.matches:
        console.print(f"[yellow]No node_modules found under {root}[/yellow]")
        return

    table = Table(title=f"node_modules under {root}", show_header=True, header_style="bold")
    if selected is not None:
        table.add_column("#", justify="right", style="dim")
        table.add_column("", width=3)
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Path")

    for index, match in enumerate(result.matches, 1):
        row = [match.display_name, match.size_display, match.absolute_path]
        if selected is not None:
            mark = "[green]✓[/green]" if match.absolute_path in selected else ""
            row = [str(index), mark] + row
        table.add_row(*row)

    console.print(table)
    console.print(
        f"[bold]{len(result.matches)} found, total size: {result.total_size_display}[/bold]"
    )


def show_selection_summary(result: ScanResult, selected: set[str]) -> None:
    """Display how many matches are selected and their combined size."""
    console.print(
        f"Selected: [bold]{len(selected)}[/bold] of {len(result.matches)} "
        f"([bold]{format_size(result.selected_bytes(selected))}[/bold])"
    )


def show_cleanup_preview(paths: Iterable[str], dry_run: bool = False) -> None:
    """Display the directories about to be removed."""
    if dry_run:
        console.print("[yellow]DRY RUN - No files will be deleted[/yellow]\n")

    table = Table(title="Cleanup Preview", show_header=True, header_style="bold")
    table.add_column("Path")
    for path in paths:
        table.add_row(path)
    console.print(table)


def show_cleanup_result(result: CleanupResult) -> None:
    """Display result of removing a single path."""
    if result.skipped:
        console.print(
            f"  [dim]-[/dim] {result.path}: [dim]missing or not a directory, skipped[/dim]"
        )
    elif not result.success:
        console.print(f"  [red]✗[/red] {result.path}: {result.error}")
    elif result.dry_run:
        console.print(f"  [yellow]~[/yellow] {result.path}: would be removed")
    else:
        console.print(f"  [green]✓[/green] {result.path}: removed")


def show_cleanup_summary(report: CleanupReport) -> None:
    """Display cleanup totals."""
    lines = [f"[bold]Removed:[/bold] {report.removed_count}"]
    if report.skipped_count:
        lines.append(f"[bold]Skipped:[/bold] {report.skipped_count}")
    if report.failed_count:
        lines.append(f"[bold red]Failed:[/bold red] {report.failed_count}")

    border = "red" if report.failed_count else "green"
    console.print(Panel("\n".join(lines), title="Cleanup Complete", border_style=border))


def show_scanning_progress() -> Progress:
    """Create a spinner for scanning; the scan has no known total."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message, console=console)
