"""Producer metadata collected from the running environment."""

from __future__ import annotations

import platform

from archivist.core.models import ProducerData


class EnvironmentProducer:
    """Implements ProducerPort from the host and library version.

    Attributes:
        producer_id: Identifier of the producing application.
    """

    def __init__(self, producer_id: str = "archivist", pid: str = "archivist.cli") -> None:
        """Initialize the producer.

        Args:
            producer_id: Application identifier stamped as producer.id.
            pid: Component identifier stamped as producer.pid.
        """
        self.producer_id = producer_id
        self._pid = pid

    def collect(self) -> ProducerData:
        """Return metadata for the current host."""
        from archivist import __version__

        return ProducerData(
            id=self.producer_id,
            ver=__version__,
            pid=self._pid,
            platform=f"{platform.system()}-{platform.machine()}".strip("-"),
        )
