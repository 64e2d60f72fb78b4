"""Object delegate adapters."""

from archivist.adapters.delegates.log_delegate import LogRecordDelegate


__all__ = ["LogRecordDelegate"]
