"""Fetched stopping pattern domain model."""

from dataclasses import dataclass

from ptv_departures.domain.models.run_metadata import RunMetadata
from ptv_departures.domain.models.stop import Stop


@dataclass(frozen=True)
class FetchedPattern:
    """The part of a run's stopping pattern relevant to the home station."""

    stations: tuple[Stop, ...]
    note: str
    run: RunMetadata
