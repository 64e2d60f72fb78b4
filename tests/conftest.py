"""Pytest configuration and shared fixtures.

This module registers custom markers for CI job separation and provides
shared fakes (log store, delegates, producer) for the test suite.
"""

from __future__ import annotations

import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from archivist.core.models import (
    CompletedItem,
    ObjectExportProgress,
    ObjectImportProgress,
    ObjectStage,
    ObjectType,
    ProducerData,
)


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from pathlib import Path

    from archivist.core.models import (
        ExportContext,
        ExportParams,
        ImportContext,
        ImportParams,
    )
    from archivist.core.services import ArchiveService


FIXED_TIME = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=UTC)


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, manifest, and services")
    config.addinivalue_line("markers", "container: Zip container adapter")
    config.addinivalue_line("markers", "delegate: Object delegates and record stores")
    config.addinivalue_line("markers", "storage: Storage adapters (s3, filesystem)")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")
    config.addinivalue_line(
        "markers", "tra: Test Responsibility Anchor (TRA) - namespace.Anchor format"
    )
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard, 3=slow, 4=manual)",
    )


class MemoryLogStore:
    """In-memory LogStorePort for tests."""

    def __init__(self, records: Iterable[dict[str, Any]] = ()) -> None:
        self.records: list[dict[str, Any]] = list(records)
        self._lock = threading.Lock()

    def iter_batches(self, batch_size: int) -> Iterator[list[dict[str, Any]]]:
        for start in range(0, len(self.records), batch_size):
            yield list(self.records[start : start + batch_size])

    def insert(self, records: Iterable[dict[str, Any]]) -> int:
        batch = list(records)
        with self._lock:
            self.records.extend(batch)
        return len(batch)


class RecordingDelegate:
    """Delegate writing one plain-text file per export and recording imports.

    Attributes:
        name: Directory name used inside the workspace.
        imported: File names seen by import_objects, in order.
    """

    def __init__(self, name: str, files: int = 1) -> None:
        self.name = name
        self.files = files
        self.export_calls = 0
        self.imported: list[str] = []

    def export_objects(
        self, params: ExportParams, context: ExportContext
    ) -> Iterator[ObjectExportProgress]:
        self.export_calls += 1
        directory = context.workspace_path / self.name
        directory.mkdir(parents=True, exist_ok=True)
        yield ObjectExportProgress(stage=ObjectStage.INITIALISING)

        completed: list[CompletedItem] = []
        for index in range(1, self.files + 1):
            file_name = f"{self.name}/{self.name}-{index}.txt"
            (context.workspace_path / file_name).write_text(f"{self.name} {index}\n")
            completed.append(CompletedItem(file_name=file_name))
            yield ObjectExportProgress(
                stage=ObjectStage.PROCESSING, completed_items=tuple(completed)
            )
        yield ObjectExportProgress(
            stage=ObjectStage.COMPLETE, completed_items=tuple(completed)
        )

    def import_objects(
        self, params: ImportParams, context: ImportContext
    ) -> Iterator[ObjectImportProgress]:
        pending = context.pending_items
        yield ObjectImportProgress(stage=ObjectStage.INITIALISING, pending_items=pending)
        for item in pending:
            assert (context.workspace_path / item.file_name).is_file()
            self.imported.append(item.file_name)
        yield ObjectImportProgress(stage=ObjectStage.COMPLETE, applied_items=pending)


class FailingDelegate:
    """Delegate whose export and import raise after the first snapshot."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or RuntimeError("delegate exploded")

    def export_objects(
        self, params: ExportParams, context: ExportContext
    ) -> Iterator[ObjectExportProgress]:
        yield ObjectExportProgress(stage=ObjectStage.INITIALISING)
        raise self.error

    def import_objects(
        self, params: ImportParams, context: ImportContext
    ) -> Iterator[ObjectImportProgress]:
        yield ObjectImportProgress(stage=ObjectStage.INITIALISING)
        raise self.error


class FakeProducer:
    """ProducerPort returning fixed metadata."""

    def collect(self) -> ProducerData:
        return ProducerData(id="test", ver="0.0.0", pid="tests", platform="test-os")


@pytest.fixture
def memory_store() -> MemoryLogStore:
    """Log store pre-filled with five records."""
    return MemoryLogStore({"seq": i, "message": f"event {i}"} for i in range(5))


@pytest.fixture
def empty_store() -> MemoryLogStore:
    return MemoryLogStore()


@pytest.fixture
def recording_delegate() -> Callable[..., RecordingDelegate]:
    """Factory for RecordingDelegate(name, files=1)."""
    return RecordingDelegate


@pytest.fixture
def failing_delegate() -> FailingDelegate:
    return FailingDelegate()


@pytest.fixture
def fake_producer() -> FakeProducer:
    return FakeProducer()


@pytest.fixture
def make_service(
    tmp_path: Path, fake_producer: FakeProducer
) -> Callable[..., ArchiveService]:
    """Factory building an ArchiveService rooted at tmp_path/cache.

    Keyword arguments are passed through to ArchiveService, with
    delegates defaulting to a RecordingDelegate for LOG.
    """
    from archivist.adapters.container import ZipContainer
    from archivist.adapters.storage import create_router
    from archivist.core.services import ArchiveService

    def factory(**kwargs: Any) -> ArchiveService:
        kwargs.setdefault("delegates", {ObjectType.LOG: RecordingDelegate("log")})
        kwargs.setdefault("container", ZipContainer())
        kwargs.setdefault("producer", fake_producer)
        kwargs.setdefault("cache_dir", tmp_path / "cache")
        kwargs.setdefault("storage", create_router())
        kwargs.setdefault("clock", lambda: FIXED_TIME)
        return ArchiveService(**kwargs)

    return factory
