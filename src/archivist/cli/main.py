"""CLI commands for archivist."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console

from archivist.cli.formatting import (
    _configure_logging,
    _describe_snapshot,
    _exit_with_error,
)
from archivist.core.exceptions import ArchivistError
from archivist.core.models import ObjectType


if TYPE_CHECKING:
    from archivist import ArchiveService


app = typer.Typer(
    name="archive",
    help="Bundle data objects into versioned archive containers and import them back.",
    no_args_is_help=True,
)


def build_service(
    log_file: Path | None,
    cache_dir: Path | None,
    keep_workspace: bool,
    workers: int,
    batch_size: int = 1000,
) -> ArchiveService:
    """Create an ArchiveService from CLI options.

    Args:
        log_file: JSON-lines file backing the log delegate, if any.
        cache_dir: Cache directory override.
        keep_workspace: Keep staging directories after the run.
        workers: Parallel delegate runs.
        batch_size: Records per exported log file.

    Returns:
        A default-wired ArchiveService.

    Raises:
        typer.Exit: If the settings are invalid.
    """
    from archivist import ArchiveService, ArchiveSettings, JsonlLogStore

    try:
        settings = ArchiveSettings(
            cache_dir=cache_dir,
            keep_workspace=keep_workspace,
            max_workers=workers,
            batch_size=batch_size,
        )
    except ArchivistError as e:
        raise _exit_with_error(e) from None

    log_store = JsonlLogStore(log_file) if log_file is not None else None
    return ArchiveService.from_defaults(log_store=log_store, settings=settings)


_TYPE_OPTION_HELP = "Object type to include. Repeat for several types."
_LOG_FILE_HELP = "JSON-lines file holding log records."
_CACHE_DIR_HELP = "Directory for workspaces and containers (default: platform cache)."
_KEEP_HELP = "Keep the staging workspace on disk for inspection."
_WORKERS_HELP = "Number of object types processed in parallel."


@app.command()
def export(
    types: list[ObjectType] | None = typer.Option(
        None, "--type", "-t", help=_TYPE_OPTION_HELP
    ),
    log_file: Path | None = typer.Option(None, "--log-file", "-l", help=_LOG_FILE_HELP),
    target: str | None = typer.Option(
        None,
        "--target",
        help="Also deliver the container here (local path or s3:// URI).",
    ),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=_CACHE_DIR_HELP),
    keep_workspace: bool = typer.Option(False, "--keep-workspace", help=_KEEP_HELP),
    workers: int = typer.Option(1, "--workers", "-w", help=_WORKERS_HELP),
    batch_size: int = typer.Option(
        1000, "--batch-size", help="Log records per file inside the container."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Export object types into a new archive container."""
    from archivist import ArchiveObject, ExportRequest, RichProgressReporter

    _configure_logging(verbose)
    service = build_service(log_file, cache_dir, keep_workspace, workers, batch_size)
    request = ExportRequest(
        objects=tuple(ArchiveObject(t) for t in types or []),
        target_file_path=target,
    )

    console = Console()
    try:
        with RichProgressReporter(console=console) as progress:
            snapshots = service.export(request, progress=progress)
            for snapshot in snapshots:
                console.print(_describe_snapshot(snapshot))
                final = snapshot
    except ArchivistError as e:
        raise _exit_with_error(e) from None

    typer.echo(f"Container: {final.output_file_path}")
    if final.target_file_path:
        typer.echo(f"Delivered to: {final.target_file_path}")


@app.command(name="import")
def import_archive(
    source: str = typer.Argument(help="Container to import (local path or s3:// URI)."),
    types: list[ObjectType] | None = typer.Option(
        None, "--type", "-t", help=_TYPE_OPTION_HELP
    ),
    log_file: Path | None = typer.Option(None, "--log-file", "-l", help=_LOG_FILE_HELP),
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=_CACHE_DIR_HELP),
    keep_workspace: bool = typer.Option(False, "--keep-workspace", help=_KEEP_HELP),
    workers: int = typer.Option(1, "--workers", "-w", help=_WORKERS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Validate a container and import object types from it."""
    from archivist import ArchiveObject, ImportRequest, RichProgressReporter

    _configure_logging(verbose)
    service = build_service(log_file, cache_dir, keep_workspace, workers)
    request = ImportRequest(
        source_file_path=source,
        objects=tuple(ArchiveObject(t) for t in types or []),
    )

    console = Console()
    try:
        with RichProgressReporter(console=console) as progress:
            snapshots = service.import_archive(request, progress=progress)
            for snapshot in snapshots:
                console.print(_describe_snapshot(snapshot))
                final = snapshot
    except ArchivistError as e:
        raise _exit_with_error(e) from None

    for object_type, object_progress in final.per_type.items():
        typer.echo(f"Imported {len(object_progress.applied_items)} {object_type} item(s)")


def main() -> None:
    """Entry point for the CLI."""
    app()
