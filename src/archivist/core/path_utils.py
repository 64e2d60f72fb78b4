"""Path and URI helpers for the archive pipeline."""

from __future__ import annotations

from datetime import UTC, datetime


def archive_file_name(created_at: datetime) -> str:
    """Generate the container file name for an export.

    Format: archive-YYYY-MM-DDTHHMMSS.ffffffZ.zip (UTC, no colons so the
    name is valid on every platform).

    Args:
        created_at: When the export finished.

    Returns:
        File name for the container.
    """
    # Ensure UTC timezone for consistent formatting
    if created_at.tzinfo is None:
        dt = created_at.replace(tzinfo=UTC)
    else:
        dt = created_at.astimezone(UTC)

    return f"archive-{dt.strftime('%Y-%m-%dT%H%M%S.%f')}Z.zip"


def parse_uri_scheme(uri: str) -> str | None:
    """Extract the URI scheme from a source string.

    Args:
        uri: Source URI or file path.

    Returns:
        The scheme (e.g., 's3', 'file') or None for local paths.
    """
    if "://" in uri:
        scheme = uri.split("://", 1)[0]
        # Avoid confusing Windows drive letters (C:) with schemes
        if len(scheme) > 1:
            return scheme.lower()
    return None


def strip_file_scheme(uri: str) -> str:
    """Strip file:// prefix from URI, returning plain path.

    Args:
        uri: URI that may have file:// prefix.

    Returns:
        The path without file:// prefix.
    """
    if uri.startswith("file://"):
        return uri[7:]  # len("file://") == 7
    return uri


def is_remote(uri: str) -> bool:
    """Check whether a path needs a storage backend to be read or written."""
    return parse_uri_scheme(uri) not in (None, "file")


def uri_basename(uri: str) -> str:
    """Return the last path segment of a local path or URI."""
    return strip_file_scheme(uri).rstrip("/").rsplit("/", 1)[-1]
