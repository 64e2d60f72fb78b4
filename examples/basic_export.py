"""Basic export example.

This example exports the records of a JSON-lines log file into a new
archive container. The service stages the files in a workspace under
the cache directory, seals them with a manifest and packs the zip.
"""

from pathlib import Path

from archivist import (
    ArchiveObject,
    ArchiveService,
    ArchiveSettings,
    ExportRequest,
    JsonlLogStore,
    ObjectType,
)


# Option 1: Manual wiring (full control over adapters)
# ArchiveService(delegates={ObjectType.LOG: LogRecordDelegate(store)},
#                container=ZipContainer(), producer=EnvironmentProducer(),
#                cache_dir=Path("./archives"))

# Option 2: Factory method (recommended for most cases)
store = JsonlLogStore(Path("./events.jsonl"))
service = ArchiveService.from_defaults(
    log_store=store,
    settings=ArchiveSettings(cache_dir=Path("./archives"), batch_size=500),
)

request = ExportRequest(objects=(ArchiveObject(ObjectType.LOG),))

# Each stage yields an immutable snapshot
for snapshot in service.export(request):
    print(f"{snapshot.stage}: {', '.join(f'{t}={p.stage}' for t, p in snapshot.per_type.items())}")

# The last snapshot (COMPLETE) carries the container path
print(f"Container written to: {snapshot.output_file_path}")

# Deliver a copy somewhere else by setting target_file_path
# (local path, file:// or s3:// URI)
# ExportRequest(objects=..., target_file_path="s3://my-bucket/exports/latest.zip")
