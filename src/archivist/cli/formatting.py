"""Shared formatting helpers for CLI commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from archivist.core.formatting import stage_to_color


if TYPE_CHECKING:
    from archivist.core.exceptions import ArchivistError
    from archivist.core.models import ExportProgress, ImportProgress


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _format_stage_with_color(stage: str) -> Text:
    """Format a stage name with color coding.

    Args:
        stage: Pipeline or object stage name.

    Returns:
        Rich Text object with the stage's color, if any.
    """
    color = stage_to_color(stage)
    return Text(stage, style=color) if color else Text(stage)


def _describe_snapshot(snapshot: ExportProgress | ImportProgress) -> Text:
    """Render one progress snapshot as a single line."""
    line = Text()
    line.append_text(_format_stage_with_color(str(snapshot.stage)))
    for object_type, progress in snapshot.per_type.items():
        line.append(f"  {object_type}: ")
        line.append_text(_format_stage_with_color(str(progress.stage)))
    return line


def _exit_with_error(error: ArchivistError) -> typer.Exit:
    """Print an error and its recovery hint; return the Exit to raise."""
    typer.echo(f"Error: {error}", err=True)
    hint = error.recovery_hint
    if hint:
        typer.echo(f"Hint: {hint}", err=True)
    return typer.Exit(1)
