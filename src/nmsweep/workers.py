"""Worker processes for scanning and deleting.

Each worker is a separate OS process joined to the caller by one duplex
pipe. The caller sends a single START message carrying the request; the
worker answers with any number of MESSAGE notes followed by exactly one
DONE carrying the result. A worker that exits or closes the pipe before
DONE is a failure, never an empty result.
"""

import logging
import multiprocessing
from multiprocessing.connection import Connection
from typing import Any, Callable

from nmsweep.cleaner import delete_directories
from nmsweep.models import (
    DeleteRequest,
    DeleteResult,
    DirectoryMatch,
    MessageType,
    ScanRequest,
    WorkerMessage,
)
from nmsweep.recursive_scanner import scan_roots
from nmsweep.scanner import directory_size

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.1  # seconds
JOIN_TIMEOUT = 5  # seconds


class WorkerError(Exception):
    """A worker could not produce a result."""


class WorkerStartError(WorkerError):
    """The worker process could not be launched or handed its request."""


class WorkerFailedError(WorkerError):
    """The worker process went away before sending DONE."""


def _send(conn: Connection, message_type: MessageType, payload: Any = None) -> None:
    conn.send(WorkerMessage(type=message_type, payload=payload).model_dump(mode="json"))


def _receive_start(conn: Connection) -> Any:
    message = WorkerMessage.model_validate(conn.recv())
    if message.type != MessageType.START:
        raise RuntimeError(f"Expected START, got {message.type.value}")
    return message.payload


# =============================================================================
# Worker side
# =============================================================================


def scan_worker_main(conn: Connection) -> None:
    """Entry point of the scan worker process."""
    request = ScanRequest.model_validate(_receive_start(conn))

    def on_root(root: str) -> None:
        _send(conn, MessageType.MESSAGE, f"Scanning {root}")

    matches = scan_roots(
        request.roots,
        request.age_cap_months,
        max_depth=request.max_depth,
        progress_callback=on_root,
    )

    if request.with_sizes:
        measured = []
        for match in matches:
            _send(conn, MessageType.MESSAGE, f"Measuring {match.path}")
            measured.append(match.model_copy(update={"size_bytes": directory_size(match.path)}))
        matches = measured

    _send(conn, MessageType.DONE, [m.model_dump(mode="json") for m in matches])
    conn.close()


def delete_worker_main(conn: Connection) -> None:
    """Entry point of the delete worker process."""
    request = DeleteRequest.model_validate(_receive_start(conn))

    def on_path(path: str, bytes_freed: int, error: str | None) -> None:
        if error:
            _send(conn, MessageType.MESSAGE, f"Failed to delete {path}: {error}")
        else:
            _send(conn, MessageType.MESSAGE, f"Deleted {path}")

    result = delete_directories(request, progress_callback=on_path)

    _send(conn, MessageType.DONE, result.model_dump(mode="json"))
    conn.close()


# =============================================================================
# Caller side
# =============================================================================


class Worker:
    """Handle on one worker process and the caller's end of its pipe."""

    def __init__(self, target: Callable[[Connection], None], name: str | None = None):
        self.target = target
        self.name = name or target.__name__
        self.process: multiprocessing.Process | None = None
        self.conn: Connection | None = None
        self.done = False

    def __enter__(self) -> "Worker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.kill()

    def start(self, payload: Any) -> None:
        """Launch the process and send it the START message."""
        parent_conn, child_conn = multiprocessing.Pipe()
        process = multiprocessing.Process(
            target=self.target,
            args=(child_conn,),
            name=self.name,
            daemon=True,
        )

        try:
            process.start()
        except (OSError, RuntimeError) as e:
            parent_conn.close()
            child_conn.close()
            raise WorkerStartError(f"{self.name}: spawn failed! ({e})") from e

        # Only the child keeps its end open, so its exit shows up as EOF here
        child_conn.close()
        self.process = process
        self.conn = parent_conn

        try:
            _send(parent_conn, MessageType.START, payload)
        except (OSError, ValueError) as e:
            self.kill()
            raise WorkerStartError(f"{self.name}: could not send request ({e})") from e

    def poll(self, timeout: float = 0) -> WorkerMessage | None:
        """
        Return the next message from the worker.

        Args:
            timeout: Seconds to wait for a message

        Returns:
            The message, or None if nothing arrived within timeout

        Raises:
            WorkerFailedError: If the worker is gone and the pipe is drained
        """
        if self.conn is None or self.process is None:
            raise WorkerError(f"{self.name} is not running")

        try:
            if not self.conn.poll(timeout):
                # DONE may have landed between the poll and the liveness check
                if not self.process.is_alive() and not self.conn.poll(0):
                    raise WorkerFailedError(
                        f"{self.name} exited with code {self.process.exitcode} before finishing"
                    )
                return None
            data = self.conn.recv()
        except (EOFError, OSError) as e:
            raise WorkerFailedError(f"{self.name} exited before finishing") from e

        return WorkerMessage.model_validate(data)

    def wait(self, on_message: Callable[[str], None] | None = None) -> Any:
        """
        Wait for DONE, forwarding MESSAGE payloads along the way.

        The process is killed as soon as DONE arrives; anything it sends
        afterwards is ignored.

        Args:
            on_message: Optional callback(text) for each informational message

        Returns:
            The DONE payload
        """
        while True:
            message = self.poll(POLL_INTERVAL)
            if message is None:
                continue

            if message.type == MessageType.MESSAGE:
                log.info("%s: %s", self.name, message.payload)
                if on_message:
                    on_message(str(message.payload))
            elif message.type == MessageType.DONE:
                self.done = True
                self.kill()
                return message.payload

    def kill(self) -> None:
        """Terminate the worker unconditionally and release the pipe."""
        if self.process is not None:
            if self.process.is_alive():
                self.process.kill()
            self.process.join(JOIN_TIMEOUT)
        if self.conn is not None:
            self.conn.close()
            self.conn = None


def run_scan(
    request: ScanRequest,
    on_message: Callable[[str], None] | None = None,
) -> list[DirectoryMatch]:
    """
    Scan in a worker process.

    Args:
        request: Roots and age cap
        on_message: Optional callback(text) for progress notes

    Returns:
        Matches in discovery order; empty if nothing is old enough

    Raises:
        WorkerStartError: If the worker could not be launched
        WorkerFailedError: If the worker died before finishing
    """
    with Worker(scan_worker_main, name="scan-worker") as worker:
        worker.start(request.model_dump(mode="json"))
        payload = worker.wait(on_message)

    return [DirectoryMatch.model_validate(item) for item in payload]


def run_delete(
    request: DeleteRequest,
    on_message: Callable[[str], None] | None = None,
) -> DeleteResult:
    """
    Delete directories in a worker process.

    Args:
        request: Paths to delete
        on_message: Optional callback(text) for per-path notes

    Returns:
        DeleteResult with the reclaimed byte total

    Raises:
        WorkerStartError: If the worker could not be launched
        WorkerFailedError: If the worker died before finishing
    """
    with Worker(delete_worker_main, name="delete-worker") as worker:
        worker.start(request.model_dump(mode="json"))
        payload = worker.wait(on_message)

    return DeleteResult.model_validate(payload)
