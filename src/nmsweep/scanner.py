"""Directory sizing and size formatting for nmsweep."""

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

from nmsweep.config import GIB, MIB

logger = logging.getLogger(__name__)

PathLike = str | os.PathLike


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def _lstat_or_none(path: str) -> os.stat_result | None:
    """Read metadata without following links, None if it can't be read."""
    try:
        return os.lstat(path)
    except OSError as e:
        logger.debug("Skipping unreadable entry %s: %s", path, e)
        return None


def iter_file_paths(path: PathLike) -> Iterator[str]:
    """
    Yield every non-directory entry strictly beneath ``path``.

    Links are listed but never followed. Directories that can't be listed
    are collected and logged instead of stopping the walk.

    Args:
        path: Directory to walk

    Yields:
        Full paths of entries that are not directories
    """
    errors: list[OSError] = []
    for dirpath, _dirnames, filenames in os.walk(path, onerror=errors.append):
        for name in filenames:
            yield os.path.join(dirpath, name)

    for error in errors:
        logger.debug("Skipped while sizing %s: %s", path, error)


def folder_size(path: PathLike) -> int:
    """
    Total size in bytes of all regular files beneath a directory.

    Never raises. Symlinks, sockets and entries whose metadata can't be
    read do not count.

    Args:
        path: Directory to measure

    Returns:
        Sum of regular file lengths
    """
    stats = (_lstat_or_none(p) for p in iter_file_paths(path))
    return sum(st.st_size for st in stats if st is not None and stat.S_ISREG(st.st_mode))


def format_size(size_bytes: int) -> str:
    """Format bytes as MB, or GB once strictly above 1 GiB (binary units)."""
    if size_bytes > GIB:
        return f"{size_bytes / GIB:.2f} GB"
    return f"{size_bytes / MIB:.2f} MB"
