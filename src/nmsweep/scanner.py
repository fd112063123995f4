"""Directory size aggregation for nmsweep."""

import logging
import os
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def get_directory_size(path: Path) -> tuple[int, int]:
    """
    Calculate the total size of a directory using os.scandir.

    Walks with an explicit stack, so tree depth is unbounded. Symlinks are
    neither followed nor counted. Entries that cannot be read contribute
    nothing.

    Args:
        path: Directory to measure

    Returns:
        Tuple of (total_bytes, file_count)
    """
    total_size = 0
    file_count = 0
    stack = [str(path)]

    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except OSError:
                        continue
        except OSError as e:
            log.debug("Cannot list %s: %s", current, e)

    return total_size, file_count


def measure_path(path: str | Path) -> tuple[int, int]:
    """
    Size in bytes and file count of everything under path.

    A regular file measures as itself; anything unreadable measures as 0.
    """
    p = Path(path)
    try:
        if p.is_symlink():
            return 0, 0
        if p.is_file():
            return p.stat().st_size, 1
    except OSError:
        return 0, 0

    return get_directory_size(p)


def directory_size(path: str | Path) -> int:
    """Size in bytes of everything under path."""
    size, _ = measure_path(path)
    return size


def total_size(paths: Iterable[str | Path]) -> int:
    """Combined size of several directories."""
    return sum(directory_size(p) for p in paths)
