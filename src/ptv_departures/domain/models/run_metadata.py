"""Run metadata domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Distributor:
    """Successor run that carries a terminating service's riders onwards."""

    run_ref: str
    destination_name: str


@dataclass(frozen=True)
class RunMetadata:
    """Identifies one scheduled trip and where it ends."""

    run_ref: str
    route_id: int
    route_type: int
    final_stop_id: int
    destination_name: str
    distributor: Distributor | None = None
