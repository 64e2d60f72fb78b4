"""JSON-lines log record store implementing LogStorePort."""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from archivist.core.ports import LogRecord


class JsonlLogStore:
    """Log records stored one JSON object per line in a single file.

    Attributes:
        path: The backing .jsonl file. Missing files read as empty.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: File to read records from and append records to.
        """
        self.path = path
        self._lock = threading.Lock()

    def iter_batches(self, batch_size: int) -> Iterator[list[LogRecord]]:
        """Yield stored records in file order, batch_size at a time.

        Raises:
            json.JSONDecodeError: If a line is not valid JSON.
        """
        if not self.path.exists():
            return

        batch: list[LogRecord] = []
        with self.path.open(encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                batch.append(json.loads(line))
                if len(batch) >= batch_size:
                    yield batch
                    batch = []
        if batch:
            yield batch

    def insert(self, records: Iterable[LogRecord]) -> int:
        """Append records to the file.

        Returns:
            Number of records appended.
        """
        lines = [json.dumps(r, separators=(",", ":")) + "\n" for r in records]
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.writelines(lines)
        return len(lines)
