"""Bounded-depth discovery of node_modules directories.

Walks a root directory a few levels deep, picks out directories named
``node_modules`` that are not nested inside another one, and assembles
them into a size-sorted ScanResult.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Generator

from nmsweep.config import MAX_DEPTH, MIN_DEPTH, TARGET_NAME
from nmsweep.models import MatchRecord, ScanResult
from nmsweep.scanner import folder_size, format_size

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when a scan can't be carried out at all."""


def contains_multiple_targets(path: str | Path, pattern: str = TARGET_NAME) -> bool:
    """
    Whether the pattern occurs more than once anywhere in the path string.

    This is a plain substring count over the full path, so a segment like
    ``my_node_modules_backup`` counts too.
    """
    return str(path).count(pattern) > 1


def check_root(root: Path) -> None:
    """Raise ScanError unless root is a directory we can list."""
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise ScanError(f"Cannot read directory {root}: {e.strerror or e}") from e


def find_matching_directories(
    root: Path,
    pattern: str = TARGET_NAME,
    min_depth: int = MIN_DEPTH,
    max_depth: int = MAX_DEPTH,
) -> Generator[Path, None, None]:
    """
    Find directories named ``pattern`` at most ``max_depth`` levels below root.

    The root itself is never a candidate. Directories whose path already
    contains the pattern once (nested copies) are left out. Links are
    reported when they point at a directory but are never descended into.
    Directories that can't be listed are collected and skipped.

    Args:
        root: Directory to search from
        pattern: Directory name to match
        min_depth: Shallowest level to report, counting root's children as 1
        max_depth: Deepest level to report

    Yields:
        Paths to matching directories, in walk order
    """
    errors: list[OSError] = []

    for dirpath, dirnames, _filenames in os.walk(root, onerror=errors.append):
        child_depth = len(Path(dirpath).relative_to(root).parts) + 1

        for name in dirnames:
            if name != pattern or child_depth < min_depth:
                continue
            candidate = Path(dirpath) / name
            if contains_multiple_targets(candidate, pattern):
                continue
            yield candidate

        # Children at the depth limit are reported but not entered
        if child_depth >= max_depth:
            dirnames[:] = []

    for error in errors:
        logger.debug("Skipped unreadable directory: %s", error)


def display_name_for(path: Path, root: Path) -> str:
    """
    Short label for a match: ``.../<parent>``, or the path relative to
    root when the parent has no name.
    """
    try:
        relative_path = path.relative_to(root)
    except ValueError as e:
        raise ScanError(str(e)) from e

    parent_name = path.parent.name
    if not parent_name:
        return str(relative_path)
    return f".../{parent_name}"


def scan_node_modules(
    base_dir: str | Path,
    calculate_size: bool,
    progress_callback: Callable[[str, int], None] | None = None,
) -> ScanResult:
    """
    Scan a root directory for node_modules folders.

    Args:
        base_dir: Root directory to scan
        calculate_size: Measure each match; when set, empty matches are dropped
        progress_callback: Optional callback(path, size_bytes) for each kept match

    Returns:
        ScanResult with matches sorted largest first

    Raises:
        ScanError: If base_dir can't be read
    """
    root = Path(base_dir)
    logger.info("Scanning node_modules in %s", root)
    check_root(root)

    folders: list[MatchRecord] = []
    total_size = 0

    for path in find_matching_directories(root):
        size_in_bytes = folder_size(path) if calculate_size else 0

        if size_in_bytes == 0 and calculate_size:
            logger.debug("Dropping empty match %s", path)
            continue

        total_size += size_in_bytes
        folders.append(
            MatchRecord(
                absolute_path=str(path),
                display_name=display_name_for(path, root),
                size_bytes=size_in_bytes,
                size_display=format_size(size_in_bytes),
            )
        )

        if progress_callback:
            progress_callback(str(path), size_in_bytes)

    folders.sort(key=lambda m: m.size_bytes, reverse=True)
    logger.info("Found %d node_modules directories", len(folders))

    return ScanResult(matches=folders, total_size_display=format_size(total_size))
