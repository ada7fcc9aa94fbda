"""CLI interface for nmsweep."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler

from nmsweep import __version__
from nmsweep.cleaner import clean_node_modules
from nmsweep.config import debug_enabled
from nmsweep.display import (
    confirm_action,
    console,
    err_console,
    show_cleanup_preview,
    show_cleanup_result,
    show_cleanup_summary,
    show_scan_result,
    show_scanning_progress,
    show_selection_summary,
)
from nmsweep.models import ScanResult
from nmsweep.recursive_scanner import ScanError, scan_node_modules
from nmsweep.scanner import expand_path

app = typer.Typer(
    name="nmsweep",
    help="Find node_modules directories and reclaim the disk space they use",
    add_completion=False,
)


def configure_logging(debug: bool) -> None:
    """Route log records through rich; WARNING by default, DEBUG on request."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"nmsweep version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """nmsweep - find and remove node_modules directories."""
    configure_logging(debug or debug_enabled())


def resolve_root(root: str) -> Path:
    return expand_path(root).absolute()


def run_scan(root: Path, calculate_size: bool) -> ScanResult:
    """Scan with a spinner, exiting with code 1 if the root can't be read."""
    with show_scanning_progress() as progress:
        task = progress.add_task(f"Scanning {root}...", total=None)

        def update_progress(path: str, size_bytes: int) -> None:
            progress.update(task, description=f"Found {path}")

        try:
            return scan_node_modules(root, calculate_size, progress_callback=update_progress)
        except ScanError as e:
            progress.stop()
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)


@app.command()
def scan(
    root: str = typer.Argument(..., help="Directory to search"),
    size: bool = typer.Option(
        False, "--size/--no-size", help="Measure each directory (slow on large trees)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Find node_modules directories up to three levels below ROOT."""
    root_path = resolve_root(root)

    if as_json:
        try:
            result = scan_node_modules(root_path, size)
        except ScanError as e:
            err_console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1)
        typer.echo(result.to_json())
        return

    result = run_scan(root_path, size)
    show_scan_result(result, str(root_path))

    if result.matches:
        console.print()
        console.print(
            f"[dim]Run [bold]nmsweep sweep {root}[/bold] to select and remove them[/dim]"
        )


@app.command()
def clean(
    paths: List[str] = typer.Argument(..., help="Directories to remove"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Remove the given directories, continuing past failures."""
    show_cleanup_preview(paths, dry_run=dry_run)

    if not yes and not dry_run:
        if not confirm_action("Proceed with cleanup?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    report = clean_node_modules(paths, dry_run=dry_run, progress_callback=show_cleanup_result)
    show_cleanup_summary(report)


@app.command()
def sweep(
    root: str = typer.Argument(..., help="Directory to search"),
    size: bool = typer.Option(
        False, "--size/--no-size", help="Measure each directory (slow on large trees)"
    ),
    exclude: Optional[List[int]] = typer.Option(
        None, "--exclude", "-x", help="Deselect the match at this index (repeatable)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate without deleting"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Scan ROOT, remove the selected matches, then scan again.

    Every match starts out selected; use --exclude to keep some.
    """
    root_path = resolve_root(root)
    result = run_scan(root_path, size)

    excluded = set(exclude or [])
    selected = {
        m.absolute_path for i, m in enumerate(result.matches, 1) if i not in excluded
    }
    show_scan_result(result, str(root_path), selected=selected)

    if not selected:
        console.print("[yellow]Nothing selected.[/yellow]")
        raise typer.Exit(0)

    console.print()
    show_selection_summary(result, selected)
    if dry_run:
        console.print("[yellow]DRY RUN - No files will be deleted[/yellow]")

    if not yes and not dry_run:
        if not confirm_action("Remove the selected directories?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    console.print("\n[bold]Cleaning...[/bold]")
    ordered = [path for path in result.paths if path in selected]
    report = clean_node_modules(ordered, dry_run=dry_run, progress_callback=show_cleanup_result)
    show_cleanup_summary(report)

    if not dry_run:
        console.print()
        show_scan_result(run_scan(root_path, size), str(root_path))


if __name__ == "__main__":
    app()
