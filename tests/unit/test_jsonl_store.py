"""Unit tests for JsonlLogStore."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.mark.delegate
@pytest.mark.tier(1)
class TestJsonlLogStore:
    """Tests for the JSON-lines record store."""

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        """A store whose file does not exist yet has no records."""
        from archivist.adapters.stores import JsonlLogStore

        store = JsonlLogStore(tmp_path / "events.jsonl")

        assert list(store.iter_batches(10)) == []

    def test_insert_appends_lines(self, tmp_path: Path) -> None:
        """insert() appends one compact JSON object per line."""
        from archivist.adapters.stores import JsonlLogStore

        path = tmp_path / "nested" / "events.jsonl"
        store = JsonlLogStore(path)

        assert store.insert([{"a": 1}, {"b": 2}]) == 2
        assert store.insert([{"c": 3}]) == 1

        assert path.read_text().splitlines() == ['{"a":1}', '{"b":2}', '{"c":3}']

    def test_iter_batches_sizes(self, tmp_path: Path) -> None:
        """Records come back in file order, batch_size at a time."""
        from archivist.adapters.stores import JsonlLogStore

        store = JsonlLogStore(tmp_path / "events.jsonl")
        store.insert({"n": i} for i in range(5))

        batches = list(store.iter_batches(2))

        assert [len(b) for b in batches] == [2, 2, 1]
        assert [r["n"] for b in batches for r in b] == [0, 1, 2, 3, 4]

    def test_blank_lines_skipped(self, tmp_path: Path) -> None:
        """Blank lines are skipped when reading."""
        from archivist.adapters.stores import JsonlLogStore

        path = tmp_path / "events.jsonl"
        path.write_text('{"n":1}\n\n   \n{"n":2}\n')
        store = JsonlLogStore(path)

        assert list(store.iter_batches(10)) == [[{"n": 1}, {"n": 2}]]

    def test_invalid_line_raises(self, tmp_path: Path) -> None:
        """Corrupt lines surface as JSON decode errors."""
        from archivist.adapters.stores import JsonlLogStore

        path = tmp_path / "events.jsonl"
        path.write_text("{broken\n")

        with pytest.raises(json.JSONDecodeError):
            list(JsonlLogStore(path).iter_batches(10))

    def test_satisfies_log_store_port(self, tmp_path: Path) -> None:
        """JsonlLogStore is a LogStorePort."""
        from archivist.adapters.stores import JsonlLogStore
        from archivist.core.ports import LogStorePort

        assert isinstance(JsonlLogStore(tmp_path / "x.jsonl"), LogStorePort)
