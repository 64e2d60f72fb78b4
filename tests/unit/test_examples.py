"""Tests validating that example code patterns work correctly.

These tests ensure the examples in the examples/ directory represent
working, copy-pasteable code patterns.
"""

from pathlib import Path

import pytest

from archivist import (
    ArchiveObject,
    ArchiveService,
    ArchiveSettings,
    ExportRequest,
    ImportRequest,
    JsonlLogStore,
    NotSupportedError,
    ObjectType,
    RequestValidationError,
)


LOG_ONLY = (ArchiveObject(ObjectType.LOG),)


@pytest.mark.core
class TestBasicExport:
    """Tests for basic_export.py example pattern."""

    def test_export_loop_ends_with_container(self, tmp_path: Path) -> None:
        """Iterating export() leaves the container path on the last snapshot."""
        store = JsonlLogStore(tmp_path / "events.jsonl")
        store.insert([{"seq": 1}])
        service = ArchiveService.from_defaults(
            log_store=store,
            settings=ArchiveSettings(cache_dir=tmp_path / "archives", batch_size=500),
        )

        for snapshot in service.export(ExportRequest(objects=LOG_ONLY)):
            pass

        assert snapshot.output_file_path is not None
        assert snapshot.output_file_path.parent == (tmp_path / "archives").resolve()


@pytest.mark.core
class TestRoundtrip:
    """Tests for roundtrip.py example pattern."""

    def test_pending_and_applied_counts(self, tmp_path: Path) -> None:
        """Import snapshots move items from pending to applied."""
        settings = ArchiveSettings(cache_dir=tmp_path / "cache", batch_size=2)
        source = JsonlLogStore(tmp_path / "source.jsonl")
        source.insert({"seq": i} for i in range(5))
        *_, exported = ArchiveService.from_defaults(
            log_store=source, settings=settings
        ).export(ExportRequest(objects=LOG_ONLY))

        target = JsonlLogStore(tmp_path / "target.jsonl")
        snapshots = list(
            ArchiveService.from_defaults(log_store=target, settings=settings).import_archive(
                ImportRequest(
                    source_file_path=str(exported.output_file_path), objects=LOG_ONLY
                )
            )
        )
        counts = [
            (len(s.per_type[ObjectType.LOG].pending_items), len(s.per_type[ObjectType.LOG].applied_items))
            for s in snapshots
        ]

        assert counts == [(0, 0), (3, 0), (0, 3), (0, 3)]
        assert [r["seq"] for b in target.iter_batches(10) for r in b] == [0, 1, 2, 3, 4]


@pytest.mark.core
class TestErrorHandling:
    """Tests for error_handling.py example pattern."""

    def test_empty_request_has_hint(self, tmp_path: Path) -> None:
        """RequestValidationError is raised by export() itself."""
        service = ArchiveService.from_defaults(
            settings=ArchiveSettings(cache_dir=tmp_path)
        )

        with pytest.raises(RequestValidationError) as exc_info:
            service.export(ExportRequest(objects=()))

        assert exc_info.value.recovery_hint

    def test_unsupported_type_raised_while_iterating(self, tmp_path: Path) -> None:
        """NotSupportedError surfaces when the snapshots are consumed."""
        service = ArchiveService.from_defaults(
            log_store=JsonlLogStore(tmp_path / "events.jsonl"),
            settings=ArchiveSettings(cache_dir=tmp_path / "archives"),
        )
        snapshots = service.export(
            ExportRequest(objects=(ArchiveObject(ObjectType.LOG), ArchiveObject(ObjectType.PROFILE)))
        )

        with pytest.raises(NotSupportedError) as exc_info:
            *_, _final = snapshots

        assert exc_info.value.recovery_hint == "Supported object types: log"
