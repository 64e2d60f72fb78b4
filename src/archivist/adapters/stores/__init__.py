"""Record store adapters."""

from archivist.adapters.stores.jsonl import JsonlLogStore


__all__ = ["JsonlLogStore"]
