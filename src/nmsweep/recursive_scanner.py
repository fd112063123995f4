"""Recursive discovery of stale node_modules directories.

The walk is depth-first over os.scandir. A directory named node_modules
is always a leaf: it is classified by age and never entered. Hidden
directories are skipped. Anything that cannot be listed or stat'ed is
dropped silently so that one unreadable corner never aborts a scan.
"""

import logging
import os
import time
from typing import Callable, Iterable

from nmsweep.models import MAX_DEPTH_LIMIT, DirectoryMatch
from nmsweep.timeutils import elapsed_millis, from_timestamp, qualifies

log = logging.getLogger(__name__)

TARGET_NAME = "node_modules"

# Recursion limit per root
DEFAULT_MAX_DEPTH = 200


def is_hidden_path(path: str) -> bool:
    """True if any component of path starts with a dot."""
    return any(part.startswith(".") for part in path.split(os.sep) if part)


def scan_tree(
    root: str,
    age_cap_months: float,
    now: float | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[DirectoryMatch]:
    """
    Find node_modules directories under root that are at least age_cap_months old.

    Args:
        root: Directory to start from
        age_cap_months: Minimum age in months for a directory to match
        now: Reference time in epoch seconds (defaults to time.time())
        max_depth: Maximum depth to descend below root, capped at MAX_DEPTH_LIMIT

    Returns:
        Matches in discovery order (filesystem listing order, unsorted)
    """
    if now is None:
        now = time.time()
    return _walk(root, age_cap_months, now, min(max_depth, MAX_DEPTH_LIMIT))


def _walk(directory: str, age_cap_months: float, now: float, depth_left: int) -> list[DirectoryMatch]:
    if depth_left <= 0:
        return []

    matches: list[DirectoryMatch] = []
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as e:
        log.debug("Cannot list %s: %s", directory, e)
        return matches

    for entry in entries:
        try:
            # Symlinked directories are not followed
            if not entry.is_dir(follow_symlinks=False):
                continue

            abs_path = os.path.abspath(entry.path)
            if is_hidden_path(abs_path):
                continue

            if entry.name == TARGET_NAME:
                mtime = entry.stat(follow_symlinks=False).st_mtime
                if qualifies(elapsed_millis(mtime, now), age_cap_months):
                    matches.append(DirectoryMatch(path=abs_path, age=from_timestamp(mtime)))
                continue

            matches.extend(_walk(entry.path, age_cap_months, now, depth_left - 1))

        except OSError as e:
            log.debug("Skipping %s: %s", entry.path, e)
            continue

    return matches


def scan_roots(
    roots: Iterable[str],
    age_cap_months: float,
    max_depth: int | None = None,
    progress_callback: Callable[[str], None] | None = None,
) -> list[DirectoryMatch]:
    """
    Scan several roots one after another and concatenate the results.

    Args:
        roots: Root directories, scanned in the given order
        age_cap_months: Minimum age in months
        max_depth: Maximum depth below each root (None for the default)
        progress_callback: Optional callback(root) before each root is walked

    Returns:
        Matches of the first root, then the second, and so on
    """
    now = time.time()
    depth = max_depth or DEFAULT_MAX_DEPTH
    results: list[DirectoryMatch] = []

    for root in roots:
        if progress_callback:
            progress_callback(root)
        results.extend(scan_tree(root, age_cap_months, now=now, max_depth=depth))

    return results
