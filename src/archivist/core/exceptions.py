"""Domain exceptions for archivist.

All library errors inherit from ArchivistError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path

    from archivist.core.models import ObjectType


class ArchivistError(Exception):
    """Base class for all archivist exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class RequestValidationError(ArchivistError):
    """Raised when an export or import request is unusable.

    Detected before any I/O takes place.
    """

    @property
    def recovery_hint(self) -> str:
        """Suggest how to build a valid request."""
        return "Request at least one object type, each type only once"


class ArchiveIntegrityError(ArchivistError):
    """Raised when a container's manifest is missing, malformed or incomplete.

    Attributes:
        path: The manifest or container path involved, if known.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest re-exporting the container."""
        return "The container is damaged or was not produced by archivist; re-export it"


class NotSupportedError(ArchivistError):
    """Raised when a requested object type has no registered delegate.

    Attributes:
        object_type: The object type that cannot be handled.
        available: Object types that do have a delegate.
    """

    def __init__(
        self, object_type: ObjectType, available: list[ObjectType] | None = None
    ) -> None:
        self.object_type = object_type
        self.available = available if available is not None else []
        super().__init__(f"Object type '{object_type}' is not supported")

    @property
    def recovery_hint(self) -> str:
        """List the object types that can be archived."""
        if self.available:
            return f"Supported object types: {', '.join(str(t) for t in self.available)}"
        return "No object delegates are registered"


class DelegateError(ArchivistError):
    """Raised when an object delegate fails while exporting or importing.

    Attributes:
        object_type: The object type whose delegate failed.
        cause: The underlying exception raised by the delegate.
    """

    def __init__(self, object_type: ObjectType, cause: Exception) -> None:
        self.object_type = object_type
        self.cause = cause
        super().__init__(f"Delegate for '{object_type}' failed: {cause}")


class ContainerError(ArchivistError):
    """Raised when packing or unpacking a container fails.

    Attributes:
        path: The container file involved.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the container file."""
        return f"Check that {self.path} is a readable zip container with free disk space"


class StorageError(ArchivistError):
    """Base class for storage-related errors.

    Raised when delivering or fetching containers (S3, filesystem) fails.

    Attributes:
        source: The storage path/URI that caused the error.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        source: str,
        cause: Exception | None = None,
    ) -> None:
        self.source = source
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(StorageError):
    """Raised when the requested file/object doesn't exist in storage."""

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the path."""
        return f"Verify the source path exists: {self.source}"


class StorageAccessError(StorageError):
    """Raised when access is denied to storage (permissions, credentials)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking permissions."""
        return "Check credentials and bucket/path permissions"


class ConfigurationError(ArchivistError):
    """Raised for configuration problems (unusable cache directory, settings)."""

    pass
