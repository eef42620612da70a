"""Board settings domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BoardSettings:
    """Tuning knobs for how the board is refreshed and advanced."""

    route_type: int = 0
    past_grace_seconds: int = 60
    initial_enrich_count: int = 3
    next_enrich_index: int = 3
