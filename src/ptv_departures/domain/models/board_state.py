"""Board state aggregate and its read-only query surface."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ptv_departures.domain.models.departure import Departure

WINDOW_SIZE = 3


@dataclass
class BoardState:
    """Per-platform departure queues for the home station.

    Queues are only replaced wholesale (``publish``), popped from the front
    (``pop_head``) or have a single departure swapped for its enriched copy
    (``replace_departure``). Readers get list copies so a queue is never
    observed half way through a change.
    """

    platforms: dict[str, list[Departure]] = field(default_factory=dict)
    version: int = 0

    @property
    def is_ready(self) -> bool:
        """Whether a board has been published yet."""
        return self.version > 0

    def publish(self, platforms: dict[str, list[Departure]]) -> None:
        """Replace the whole board with a freshly built one."""
        self.platforms = platforms
        self.version += 1

    def pop_head(self, platform: str) -> Departure | None:
        """Remove and return the first departure of a platform queue."""
        queue = self.platforms.get(platform)
        if not queue:
            return None
        return queue.pop(0)

    def replace_departure(self, platform: str, enriched: Departure) -> bool:
        """Swap a queued departure for its enriched copy.

        Returns False when the service is no longer queued on the platform or
        has already been enriched.
        """
        queue = self.platforms.get(platform)
        if queue is None:
            return False
        for index, departure in enumerate(queue):
            if departure.key == enriched.key:
                if departure.is_enriched:
                    return False
                queue[index] = enriched
                return True
        return False

    def platform_ids(self) -> list[str]:
        """Return the known platform identifiers."""
        return list(self.platforms)

    def queue(self, platform: str) -> list[Departure] | None:
        """Return a snapshot of a platform queue, or None if unknown."""
        queue = self.platforms.get(platform)
        return None if queue is None else list(queue)

    def window(self, platform: str, size: int = WINDOW_SIZE) -> list[Departure] | None:
        """Return the first ``size`` departures of a platform."""
        queue = self.platforms.get(platform)
        if queue is None:
            return None
        return list(queue[:size])

    def at(self, platform: str, index: int) -> Departure | None:
        """Return the departure at a queue position."""
        queue = self.platforms.get(platform)
        if queue is None or index < 0 or index >= len(queue):
            return None
        return queue[index]

    def after(self, platform: str, run: str) -> Departure | None:
        """Return the departure immediately following the given run."""
        queue = self.platforms.get(platform)
        if queue is None:
            return None
        for index in range(len(queue) - 1):
            if str(queue[index].run) == str(run):
                return queue[index + 1]
        return None
