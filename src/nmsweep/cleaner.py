"""Deletion of selected node_modules directories."""

import logging
import shutil
from pathlib import Path
from typing import Callable

from nmsweep.models import DeleteRequest, DeleteResult
from nmsweep.scanner import measure_path

log = logging.getLogger(__name__)


def delete_path(path: Path, dry_run: bool = False) -> tuple[int, int, str | None]:
    """
    Delete a directory tree (or a single file).

    The size is measured first since it cannot be measured afterwards.

    Args:
        path: Path to delete
        dry_run: If True, don't actually delete

    Returns:
        Tuple of (bytes_freed, files_deleted, error_message)
    """
    size, files = measure_path(path)

    if dry_run:
        return size, files, None

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except PermissionError as e:
        return 0, 0, f"Permission denied: {e}"
    except OSError as e:
        return 0, 0, f"OS error: {e}"
    except RecursionError:
        # Older shutil.rmtree recurses once per directory level
        return 0, 0, "Directory tree too deep to remove"

    return size, files, None


def delete_directories(
    request: DeleteRequest,
    progress_callback: Callable[[str, int, str | None], None] | None = None,
) -> DeleteResult:
    """
    Delete every path in the request, continuing past failures.

    Args:
        request: Paths to delete, in order
        progress_callback: Optional callback(path, bytes_freed, error) per path

    Returns:
        DeleteResult whose totals only count paths that were removed
    """
    total_bytes = 0
    total_files = 0
    deleted: list[str] = []
    failed: list[str] = []

    for path_str in request.paths:
        bytes_freed, files_deleted, error = delete_path(Path(path_str), dry_run=request.dry_run)

        if error:
            log.debug("Failed to delete %s: %s", path_str, error)
            failed.append(path_str)
        else:
            total_bytes += bytes_freed
            total_files += files_deleted
            deleted.append(path_str)

        if progress_callback:
            progress_callback(path_str, bytes_freed, error)

    return DeleteResult(
        total_bytes_reclaimed=total_bytes,
        files_deleted=total_files,
        deleted=deleted,
        failed=failed,
    )
