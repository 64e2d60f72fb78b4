"""CLI for archivist."""

# Import commands to register them with the app
from archivist.cli.commands import inspect as _inspect_module  # noqa: F401
from archivist.cli.main import app, main


__all__ = ["app", "main"]
