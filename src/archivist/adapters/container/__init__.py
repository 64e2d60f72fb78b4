"""Container packer adapters."""

from archivist.adapters.container.zip_container import ZipContainer


__all__ = ["ZipContainer"]
