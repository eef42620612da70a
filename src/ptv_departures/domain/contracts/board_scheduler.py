"""Protocol for scheduling board refreshes and ticks."""

from typing import Protocol


class BoardSchedulerProtocol(Protocol):
    """Protocol for firing the daily refresh and the minute tick."""

    async def start(self) -> None:
        """Start the scheduler."""
        ...

    async def stop(self) -> None:
        """Stop the scheduler."""
        ...
