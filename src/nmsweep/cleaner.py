"""Best-effort removal of node_modules directories."""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable

from nmsweep.models import CleanupReport, CleanupResult

logger = logging.getLogger(__name__)


def delete_path(path: Path, dry_run: bool = False) -> CleanupResult:
    """
    Remove a directory tree.

    Missing paths and paths that aren't directories are skipped, not
    treated as errors.

    Args:
        path: Directory to remove
        dry_run: If True, don't actually delete

    Returns:
        CleanupResult describing what happened
    """
    # os.path.isdir reports unstatable paths (too long, no access) as False
    if not os.path.isdir(path):
        logger.debug("Skipping %s: not an existing directory", path)
        return CleanupResult(path=str(path), skipped=True, dry_run=dry_run)

    if dry_run:
        return CleanupResult(path=str(path), dry_run=True)

    try:
        # A linked directory loses only the link, never the target's contents
        if path.is_symlink():
            path.unlink()
        else:
            shutil.rmtree(path)
    except PermissionError as e:
        logger.warning("Failed to remove %s: %s", path, e)
        return CleanupResult(path=str(path), success=False, error=f"Permission denied: {e}")
    except OSError as e:
        logger.warning("Failed to remove %s: %s", path, e)
        return CleanupResult(path=str(path), success=False, error=f"OS error: {e}")

    logger.info("Successfully removed: %s", path)
    return CleanupResult(path=str(path))


def clean_node_modules(
    paths: Iterable[str | Path],
    dry_run: bool = False,
    progress_callback: Callable[[CleanupResult], None] | None = None,
) -> CleanupReport:
    """
    Remove every directory in ``paths``.

    A failure on one path never stops the others, and the call itself
    always succeeds; failures are logged and recorded in the report.

    Args:
        paths: Directories to remove
        dry_run: If True, don't actually delete
        progress_callback: Optional callback(result) after each path

    Returns:
        CleanupReport with one result per path
    """
    report = CleanupReport()

    for path in paths:
        result = delete_path(Path(path), dry_run=dry_run)
        report.results.append(result)

        if progress_callback:
            progress_callback(result)

    if report.failed_count:
        logger.warning(
            "%d of %d directories could not be removed",
            report.failed_count,
            len(report.results),
        )
    return report
