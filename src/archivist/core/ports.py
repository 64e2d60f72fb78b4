"""Port interfaces for hexagonal architecture.

Ports define contracts that adapters must implement. The core domain
depends only on these protocols, never on concrete implementations.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from concurrent.futures import Future
    from pathlib import Path

    from archivist.core.models import (
        ExportContext,
        ExportParams,
        ImportContext,
        ImportParams,
        ObjectExportProgress,
        ObjectImportProgress,
        ProducerData,
    )

ProgressCallback = Callable[[int, int], None]

LogRecord = dict[str, Any]


@runtime_checkable
class ObjectDelegate(Protocol):
    """Exports and imports the records of one object type.

    Both operations return a finite iterator of progress snapshots. The
    last snapshot is terminal: it carries completed_items (export) or
    applied_items (import).
    """

    def export_objects(
        self, params: ExportParams, context: ExportContext
    ) -> Iterator[ObjectExportProgress]:
        """Write this type's records into the workspace.

        Args:
            params: Request-level parameters.
            context: Holds the workspace directory to write into.

        Returns:
            Iterator of snapshots ending with the completed items.
        """
        ...

    def import_objects(
        self, params: ImportParams, context: ImportContext
    ) -> Iterator[ObjectImportProgress]:
        """Apply this type's manifest items from the workspace.

        Args:
            params: Request-level parameters.
            context: Holds the workspace directory and the pending items.

        Returns:
            Iterator of snapshots ending with the applied items.
        """
        ...


@runtime_checkable
class ContainerPort(Protocol):
    """Packs a directory tree into one compressed file and back."""

    def pack(self, source_dir: Path, target_file: Path) -> None:
        """Pack source_dir (as the archive root) into target_file.

        Raises:
            ContainerError: If packing fails.
        """
        ...

    def unpack(self, source_file: Path, target_dir: Path) -> None:
        """Unpack source_file into target_dir.

        Raises:
            ContainerError: If the file is missing, corrupt or unsafe.
        """
        ...


@runtime_checkable
class ProducerPort(Protocol):
    """Collects metadata about the producing environment."""

    def collect(self) -> ProducerData:
        """Return producer metadata to stamp into the manifest."""
        ...


@runtime_checkable
class LogStorePort(Protocol):
    """Record store backing the log delegate."""

    def iter_batches(self, batch_size: int) -> Iterator[list[LogRecord]]:
        """Yield stored records in batches of at most batch_size."""
        ...

    def insert(self, records: Iterable[LogRecord]) -> int:
        """Store records and return how many were inserted."""
        ...


@runtime_checkable
class StoragePort(Protocol):
    """Remote storage backend (S3, local filesystem) for containers."""

    def download(self, source: str, dest: Path, progress: ProgressCallback) -> None:
        """Download a file from storage to local path."""
        ...

    def upload(
        self, local: Path, dest: str, progress: ProgressCallback | None = None
    ) -> None:
        """Upload a local file to storage with optional progress.

        Args:
            local: Path to local file.
            dest: Destination URI or path.
            progress: Optional callback function(bytes_uploaded, total_bytes).
        """
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Reports per-object-type progress to the user.

    This protocol defines the contract for progress display adapters.
    The core domain uses this to report progress without depending
    on any specific UI library.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Start tracking a task.

        Args:
            name: Human-readable name for the task (object type and direction).
            total: Expected number of units, or 0 when unknown.

        Returns:
            A ProgressCallback to call with (completed, total).
        """
        ...

    def finish_task(self, name: str) -> None:
        """Mark a task as complete.

        Args:
            name: The task name passed to start_task().
        """
        ...


class NullProgressReporter:
    """A ProgressReporter that produces no output.

    Used as the default when no progress reporting is desired.
    """

    def start_task(self, name: str, total: int) -> ProgressCallback:  # noqa: ARG002
        """Return a no-op callback."""
        return lambda _completed, _total: None

    def finish_task(self, name: str) -> None:
        """Do nothing."""
        _ = name  # Unused but required by protocol


@runtime_checkable
class ExecutorPort(Protocol):
    """Executor for the per-object-type fan-out.

    Abstracts over concurrent.futures executors to allow dependency injection
    and testing. The core domain uses this protocol instead of directly
    importing ThreadPoolExecutor, maintaining "concurrency at the edges".
    """

    def submit(
        self, fn: Callable[..., object], *args: object, **kwargs: object
    ) -> Future[object]:  # type: ignore[name-defined, unused-ignore]
        """Submit a function for execution.

        Args:
            fn: Function to execute.
            *args: Positional arguments to pass to fn.
            **kwargs: Keyword arguments to pass to fn.

        Returns:
            Future representing the pending result.
        """
        ...

    def __enter__(self) -> ExecutorPort:
        """Enter context manager."""
        ...

    def __exit__(
        self, exc_type: object, exc_val: object, exc_tb: object
    ) -> object | None:
        """Exit context manager."""
        ...
