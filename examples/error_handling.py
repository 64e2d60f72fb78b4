"""Error handling patterns with recovery hints.

This example demonstrates how to handle common errors and use
the recovery_hint property to provide actionable guidance.
"""

from pathlib import Path

from archivist import (
    ArchiveIntegrityError,
    ArchiveObject,
    ArchiveService,
    ArchiveSettings,
    ArchivistError,
    ContainerError,
    DelegateError,
    ExportRequest,
    ImportRequest,
    JsonlLogStore,
    NotSupportedError,
    ObjectType,
    RequestValidationError,
)


service = ArchiveService.from_defaults(
    log_store=JsonlLogStore(Path("./events.jsonl")),
    settings=ArchiveSettings(cache_dir=Path("./archives")),
)


# Pattern 1: Invalid requests fail before anything touches the disk
def export_types(*types: ObjectType) -> Path | None:
    """Export the given types, reporting unusable requests."""
    try:
        snapshots = service.export(ExportRequest(objects=tuple(ArchiveObject(t) for t in types)))
    except RequestValidationError as e:
        print(f"Bad request: {e}")
        print(f"Hint: {e.recovery_hint}")
        return None

    try:
        *_, final = snapshots
    except NotSupportedError as e:
        # recovery_hint lists the types that do have delegates
        print(f"Cannot export '{e.object_type}'. {e.recovery_hint}")
        return None
    except DelegateError as e:
        print(f"Exporting '{e.object_type}' failed: {e.cause!r}")
        return None
    return final.output_file_path


# Pattern 2: Damaged or foreign containers on import
def import_container(path: str) -> bool:
    """Import logs from a container, reporting integrity problems."""
    request = ImportRequest(source_file_path=path, objects=(ArchiveObject(ObjectType.LOG),))
    try:
        for _snapshot in service.import_archive(request):
            pass
    except ContainerError as e:
        print(f"Unreadable container {e.path}: {e}")
        return False
    except ArchiveIntegrityError as e:
        print(f"Rejected: {e}")
        print(f"Hint: {e.recovery_hint}")
        return False
    return True


# Pattern 3: Catch-all for any library error
def export_safe() -> Path | None:
    """Export logs, never raising library errors."""
    try:
        *_, final = service.export(ExportRequest(objects=(ArchiveObject(ObjectType.LOG),)))
    except ArchivistError as e:
        print(f"Error: {e}")
        if e.recovery_hint:
            print(f"Hint: {e.recovery_hint}")
        return None
    return final.output_file_path


if __name__ == "__main__":
    export_types()  # -> Bad request: No archive objects requested
    export_types(ObjectType.LOG, ObjectType.PROFILE)  # -> Cannot export 'profile'
    import_container("missing.zip")  # -> Unreadable container
