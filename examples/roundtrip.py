"""Export then import example.

Records from one store are exported into a container and imported
into a second store. The manifest decides which items each object
type receives on import.
"""

import tempfile
from pathlib import Path

from archivist import (
    ArchiveObject,
    ArchiveService,
    ArchiveSettings,
    ExportRequest,
    ImportRequest,
    JsonlLogStore,
    ObjectType,
)


with tempfile.TemporaryDirectory() as tmp:
    root = Path(tmp)
    settings = ArchiveSettings(cache_dir=root / "cache", batch_size=2)

    source = JsonlLogStore(root / "source.jsonl")
    records = [{"seq": i, "message": f"event {i}"} for i in range(5)]
    source.insert(records)

    exporter = ArchiveService.from_defaults(log_store=source, settings=settings)
    *_, exported = exporter.export(ExportRequest(objects=(ArchiveObject(ObjectType.LOG),)))
    print(f"Exported {len(records)} records to {exported.output_file_path}")

    target = JsonlLogStore(root / "target.jsonl")
    importer = ArchiveService.from_defaults(log_store=target, settings=settings)
    request = ImportRequest(
        source_file_path=str(exported.output_file_path),
        objects=(ArchiveObject(ObjectType.LOG),),
    )
    for snapshot in importer.import_archive(request):
        log_progress = snapshot.per_type[ObjectType.LOG]
        print(
            f"{snapshot.stage}: {len(log_progress.pending_items)} pending, "
            f"{len(log_progress.applied_items)} applied"
        )

    imported = sum(len(batch) for batch in target.iter_batches(1000))
    print(f"Imported {imported} records")
