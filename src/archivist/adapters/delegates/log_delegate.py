"""Object delegate for event-log records."""

from __future__ import annotations

import gzip
import json
import logging
from typing import TYPE_CHECKING

from archivist.core.models import (
    CompletedItem,
    ContentEncoding,
    ObjectExportProgress,
    ObjectImportProgress,
    ObjectStage,
    ObjectType,
)


if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from archivist.core.models import (
        ExportContext,
        ExportParams,
        ImportContext,
        ImportParams,
        ManifestItem,
    )
    from archivist.core.ports import LogRecord, LogStorePort


logger = logging.getLogger(__name__)

LOG_DIRECTORY = "log"


class LogRecordDelegate:
    """Exports log records as gzip JSON-lines batches and imports them back.

    Each batch becomes one container item named log/log-NNNNN.jsonl.gz.
    An empty store still produces one (empty) item so every exported
    container can be imported for the log type.

    Attributes:
        batch_size: Records per item file.
    """

    object_type = ObjectType.LOG

    def __init__(self, store: LogStorePort, batch_size: int = 1000) -> None:
        """Initialize the delegate.

        Args:
            store: Where records are read from and inserted into.
            batch_size: Records per item file.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._store = store
        self.batch_size = batch_size

    def export_objects(
        self, params: ExportParams, context: ExportContext
    ) -> Iterator[ObjectExportProgress]:
        """Write stored records into the workspace in batches."""
        _ = params  # The target path does not change how logs are written
        (context.workspace_path / LOG_DIRECTORY).mkdir(parents=True, exist_ok=True)
        yield ObjectExportProgress(stage=ObjectStage.INITIALISING)

        completed: list[CompletedItem] = []
        for batch in self._store.iter_batches(self.batch_size):
            completed.append(self._write_batch(context.workspace_path, len(completed) + 1, batch))
            yield ObjectExportProgress(
                stage=ObjectStage.PROCESSING, completed_items=tuple(completed)
            )

        if not completed:
            completed.append(self._write_batch(context.workspace_path, 1, []))

        logger.debug("Exported %d log item(s)", len(completed))
        yield ObjectExportProgress(
            stage=ObjectStage.COMPLETE, completed_items=tuple(completed)
        )

    def _write_batch(
        self, workspace: Path, index: int, batch: list[LogRecord]
    ) -> CompletedItem:
        file_name = f"{LOG_DIRECTORY}/log-{index:05d}.jsonl.gz"
        payload = "".join(
            json.dumps(record, separators=(",", ":")) + "\n" for record in batch
        ).encode("utf-8")
        with gzip.open(workspace / file_name, "wb") as f:
            f.write(payload)
        return CompletedItem(
            file_name=file_name,
            content_encoding=ContentEncoding.GZIP,
            exploded_size=len(payload),
        )

    def import_objects(
        self, params: ImportParams, context: ImportContext
    ) -> Iterator[ObjectImportProgress]:
        """Insert the records of every pending item into the store.

        Items are applied in manifest order. Records of an item already
        inserted stay inserted if a later item fails.
        """
        _ = params
        pending = context.pending_items
        yield ObjectImportProgress(stage=ObjectStage.INITIALISING, pending_items=pending)

        applied: list[ManifestItem] = []
        for index, item in enumerate(pending):
            if item.object_type != self.object_type:
                raise ValueError(
                    f"Item '{item.file_name}' has type '{item.object_type}', expected '{self.object_type}'"
                )
            records = _read_records(context.workspace_path / item.file_name, item.content_encoding)
            self._store.insert(records)
            applied.append(item)
            yield ObjectImportProgress(
                stage=ObjectStage.PROCESSING,
                pending_items=pending[index + 1 :],
                applied_items=tuple(applied),
            )

        logger.debug("Imported %d log item(s)", len(applied))
        yield ObjectImportProgress(stage=ObjectStage.COMPLETE, applied_items=tuple(applied))


def _read_records(path: Path, encoding: ContentEncoding) -> list[LogRecord]:
    """Decode a JSON-lines item file."""
    if encoding == ContentEncoding.GZIP:
        with gzip.open(path, "rt", encoding="utf-8") as f:
            lines = f.readlines()
    else:
        with path.open(encoding="utf-8") as f:
            lines = f.readlines()
    return [json.loads(line) for line in lines if line.strip()]
