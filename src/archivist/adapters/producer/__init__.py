"""Producer metadata adapters."""

from archivist.adapters.producer.environment import EnvironmentProducer


__all__ = ["EnvironmentProducer"]
