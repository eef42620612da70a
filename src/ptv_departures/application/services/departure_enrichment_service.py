"""Enrichment of raw departures with destination, stops and subtitle."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from ptv_departures.application.services.pattern_classifier import classify_pattern

if TYPE_CHECKING:
    from ptv_departures.application.services.destination_resolver import DestinationResolver
    from ptv_departures.application.services.pattern_fetcher import PatternFetcher
    from ptv_departures.application.services.route_colour_map import RouteColourMap
    from ptv_departures.domain.models.departure import Departure

logger = logging.getLogger(__name__)


class DepartureEnrichmentService:
    """Runs Pattern Fetcher -> Destination Resolver -> Pattern Classifier."""

    def __init__(self, pattern_fetcher: PatternFetcher, resolver: DestinationResolver) -> None:
        self.pattern_fetcher = pattern_fetcher
        self.resolver = resolver

    async def enrich(self, departure: Departure, colour_map: RouteColourMap) -> Departure:
        """Return an enriched copy of a departure.

        The input departure is left untouched, so the caller can publish
        the result in a single step.

        Raises:
            TimetableApiError: If the departure's own pattern cannot be fetched.
        """
        pattern = await self.pattern_fetcher.fetch(departure.type, departure.run)
        resolved = await self.resolver.resolve(departure, pattern, colour_map)
        subtitle = classify_pattern(resolved.stations, pattern.note)

        logger.info(f"{pattern.run.run_ref} {departure.time} {resolved.dest} {subtitle}")

        return replace(
            departure,
            dest=resolved.dest,
            stations=resolved.stations,
            subtitle=subtitle,
        )
