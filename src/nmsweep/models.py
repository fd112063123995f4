"""Data models for nmsweep."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Deepest directory recursion a scan may be asked for, well below the
# interpreter recursion limit
MAX_DEPTH_LIMIT = 500


class MessageType(str, Enum):
    """Message types exchanged between the caller and a worker process."""

    START = "START"  # caller -> worker, carries the request
    MESSAGE = "MESSAGE"  # worker -> caller, informational
    DONE = "DONE"  # worker -> caller, carries the result


class DirectoryMatch(BaseModel):
    """A node_modules directory old enough to be deleted."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Absolute, normalised path of the directory")
    age: datetime = Field(..., description="Last modification time of the directory")
    size_bytes: int | None = Field(None, ge=0, description="Size in bytes, if measured")


class ScanRequest(BaseModel):
    """Input of the scan worker."""

    roots: list[str] = Field(..., description="Root directories to search, in order")
    age_cap_months: float = Field(..., gt=0, description="Minimum age in months")
    max_depth: int | None = Field(
        None, gt=0, le=MAX_DEPTH_LIMIT, description="Recursion limit per root"
    )
    with_sizes: bool = Field(False, description="Measure each match before returning")


class DeleteRequest(BaseModel):
    """Input of the delete worker."""

    paths: list[str] = Field(..., description="Absolute paths to remove, in order")
    dry_run: bool = Field(False, description="Measure without deleting")


class DeleteResult(BaseModel):
    """Result of a delete run."""

    total_bytes_reclaimed: int = Field(0, ge=0, description="Bytes freed by removed paths")
    files_deleted: int = Field(0, ge=0, description="Files removed along with them")
    deleted: list[str] = Field(default_factory=list, description="Paths that were removed")
    failed: list[str] = Field(default_factory=list, description="Paths that could not be removed")

    @property
    def deleted_count(self) -> int:
        """Number of removed directories."""
        return len(self.deleted)


class WorkerMessage(BaseModel):
    """A single message on a worker pipe."""

    type: MessageType
    payload: Any = None
