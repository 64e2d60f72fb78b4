"""Storage backend adapters."""

from archivist.adapters.storage.filesystem import FilesystemStorage
from archivist.adapters.storage.router import RouterStorage, create_router
from archivist.adapters.storage.s3 import S3Storage


__all__ = ["FilesystemStorage", "RouterStorage", "S3Storage", "create_router"]
