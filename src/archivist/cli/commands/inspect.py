"""Inspect command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from archivist.cli.formatting import _exit_with_error
from archivist.cli.main import app
from archivist.core.exceptions import ArchivistError
from archivist.core.formatting import format_size
from archivist.core.models import ArchiveManifest


def load_manifest(source: str, cache_dir: Path | None = None) -> ArchiveManifest:
    """Unpack a container into a throwaway workspace and read its manifest.

    Args:
        source: Local path or remote URI of the container.
        cache_dir: Cache directory override for the workspace.

    Returns:
        The decoded manifest.

    Raises:
        ArchivistError: If the container cannot be fetched, unpacked or validated.
    """
    from archivist.adapters.container import ZipContainer
    from archivist.adapters.storage import create_router
    from archivist.config import resolve_cache_dir
    from archivist.core.manifest import read_manifest
    from archivist.core.path_utils import is_remote, strip_file_scheme, uri_basename
    from archivist.core.workspace import workspace

    with workspace(resolve_cache_dir(cache_dir)) as path:
        if is_remote(source):
            local = path / ".incoming" / uri_basename(source)
            local.parent.mkdir()
            create_router().download(source, local, lambda _done, _total: None)
        else:
            local = Path(strip_file_scheme(source))
        ZipContainer().unpack(local, path)
        return read_manifest(path)


@app.command()
def inspect(
    source: str = typer.Argument(help="Container to inspect (local path or s3:// URI)."),
    cache_dir: Path | None = typer.Option(
        None, "--cache-dir", help="Directory for the temporary workspace."
    ),
) -> None:
    """Show a container's manifest without importing anything."""
    try:
        manifest = load_manifest(source, cache_dir)
    except ArchivistError as e:
        raise _exit_with_error(e) from None

    producer = manifest.producer
    typer.echo(f"Format:   {manifest.format_id} {manifest.format_version}")
    typer.echo(f"Created:  {manifest.timestamp}")
    typer.echo(f"Producer: {producer.get('id', '')} {producer.get('ver', '')}".rstrip())
    typer.echo(f"Items:    {manifest.item_count}")

    if not manifest.items:
        return

    table = Table()
    table.add_column("Type")
    table.add_column("File")
    table.add_column("Encoding")
    table.add_column("Size", justify="right")
    table.add_column("Exploded", justify="right")

    for item in manifest.items:
        table.add_row(
            str(item.object_type),
            item.file_name,
            str(item.content_encoding),
            format_size(item.size),
            format_size(item.exploded_size),
        )

    console = Console(force_terminal=True)
    console.print(table)
