"""Departure domain model."""

from dataclasses import dataclass
from datetime import datetime

from ptv_departures.domain.models.stop import Stop


@dataclass(frozen=True)
class Departure:
    """One upcoming service on one platform.

    A raw departure only carries its identity, time and service group.
    Enrichment produces a new instance with ``dest``, ``stations`` and
    ``subtitle`` filled in together.
    """

    type: int
    run: str
    time: datetime
    group: str
    platform: str
    dest: str | None = None
    stations: tuple[Stop, ...] | None = None
    subtitle: str | None = None

    @property
    def key(self) -> tuple[int, str]:
        """Identity of the service within a platform queue."""
        return (self.type, self.run)

    @property
    def is_enriched(self) -> bool:
        """Whether destination, stop list and subtitle have been resolved."""
        return self.stations is not None
