"""Board state manager: full refresh, minute tick and lazy enrichment."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from ptv_departures.application.services.route_colour_map import RouteColourMap
from ptv_departures.domain.errors import TimetableApiError, reason_for_status
from ptv_departures.domain.models.board_settings import BoardSettings
from ptv_departures.domain.models.departure import Departure

if TYPE_CHECKING:
    from collections.abc import Callable

    from ptv_departures.application.services.departure_enrichment_service import (
        DepartureEnrichmentService,
    )
    from ptv_departures.domain.contracts.board_broadcaster import BoardBroadcasterProtocol
    from ptv_departures.domain.models.board_state import BoardState
    from ptv_departures.domain.models.network_configuration import NetworkConfiguration
    from ptv_departures.domain.models.timetable import DeparturesResponse
    from ptv_departures.domain.ports import TimetableRepository

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _describe_error(error: Exception) -> str:
    """Describe a failed upstream call for the log."""
    if isinstance(error, TimetableApiError):
        return f"{error.reason} (status: {error.status_code}, error: {error})"
    return f"{reason_for_status(None)} (error: {error})"


class BoardManager:
    """Keeps the per-platform queues of the board fresh.

    The manager is the only writer of the board state. Every change to the
    board happens between two suspension points, so readers on the same
    event loop never see a partly built queue.
    """

    def __init__(
        self,
        repository: TimetableRepository,
        enrichment_service: DepartureEnrichmentService,
        board_state: BoardState,
        broadcaster: BoardBroadcasterProtocol,
        network: NetworkConfiguration,
        station_id: int,
        settings: BoardSettings | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the board manager.

        Args:
            repository: Upstream timetable repository.
            enrichment_service: Service that enriches a single departure.
            board_state: The board state to maintain.
            broadcaster: Pushes refresh/append notifications to clients.
            network: Network configuration (groups, CBD stations).
            station_id: Id of the home station.
            settings: Refresh and tick settings.
            clock: Returns the current time as an aware datetime.
        """
        self.repository = repository
        self.enrichment_service = enrichment_service
        self.board_state = board_state
        self.broadcaster = broadcaster
        self.network = network
        self.station_id = station_id
        self.settings = settings or BoardSettings()
        self.clock = clock
        self.colour_map = RouteColourMap()
        self._refresh_lock = asyncio.Lock()
        self._in_flight: set[tuple[str, tuple[int, str]]] = set()
        self._pending: set[asyncio.Task] = set()

    @property
    def status(self) -> str:
        """Either "cold" before the first board is published or "ready"."""
        return "ready" if self.board_state.is_ready else "cold"

    async def full_refresh(self) -> bool:
        """Rebuild the whole board from a fresh departures list.

        Returns:
            True if a new board was published, False if the previous one was kept.
        """
        async with self._refresh_lock:
            try:
                response = await self.repository.get_departures(
                    self.station_id, self.settings.route_type
                )
            except Exception as e:
                logger.error(f"Full refresh failed, keeping previous board: {_describe_error(e)}")
                return False

            colour_map = RouteColourMap.build(response.routes.values(), self.network)
            platforms = self._bucket_by_platform(response, colour_map)

            # Launch every enrichment before awaiting any of them
            slots: list[tuple[str, int]] = []
            jobs = []
            for platform, queue in platforms.items():
                for index in range(min(self.settings.initial_enrich_count, len(queue))):
                    slots.append((platform, index))
                    jobs.append(self._enrich_or_keep(queue[index], colour_map))
            results = await asyncio.gather(*jobs)
            for (platform, index), departure in zip(slots, results, strict=True):
                platforms[platform][index] = departure
            logger.info("Fetched upcoming departure details")

            self.colour_map = colour_map
            self.board_state.publish(platforms)

        await self.broadcaster.broadcast_refresh()
        return True

    def _bucket_by_platform(
        self, response: DeparturesResponse, colour_map: RouteColourMap
    ) -> dict[str, list[Departure]]:
        """Turn upstream departures into per-platform queues."""
        cutoff = self.clock() - timedelta(seconds=self.settings.past_grace_seconds)
        platforms: dict[str, list[Departure]] = {}
        seen: set[tuple[str, tuple[int, str]]] = set()
        count = 0
        for record in response.departures:
            if record.scheduled_departure < cutoff:
                continue
            if record.platform_number is None:
                logger.debug(f"Ignoring run {record.run_ref} without a platform")
                continue

            run = response.runs.get(record.run_ref)
            departure = Departure(
                type=run.route_type if run else self.settings.route_type,
                run=record.run_ref,
                time=record.scheduled_departure,
                group=colour_map.group_for(record.route_id) or self.network.special_group,
                platform=record.platform_number,
            )
            identity = (departure.platform, departure.key)
            if identity in seen:
                logger.warning(
                    f"Duplicate departure detected and removed: run {departure.run} "
                    f"on platform {departure.platform}"
                )
                continue
            seen.add(identity)
            platforms.setdefault(departure.platform, []).append(departure)
            count += 1

        for queue in platforms.values():
            queue.sort(key=lambda d: d.time)

        logger.info(f"Retrieved {count} departure(s) on {len(platforms)} platform(s)")
        return platforms

    async def _enrich_or_keep(self, departure: Departure, colour_map: RouteColourMap) -> Departure:
        """Enrich a departure, falling back to the raw one on failure."""
        try:
            return await self.enrichment_service.enrich(departure, colour_map)
        except Exception as e:
            logger.error(
                f"Failed to fetch details for run {departure.run} on platform "
                f"{departure.platform}: {_describe_error(e)}"
            )
            return departure

    async def minute_tick(self) -> list[asyncio.Task]:
        """Advance the queues and lazily enrich the next service in line.

        Expired heads are dropped silently. When a head is due, the departure
        at the fourth position (or the last one, if fewer remain) is enriched
        in the background and pushed to that platform's clients.

        Returns:
            The enrichment tasks launched by this tick.
        """
        now = self.clock()
        tasks: list[asyncio.Task] = []
        for platform in self.board_state.platform_ids():
            queue = self.board_state.platforms.get(platform)
            if not queue:
                continue

            seconds_to_go = (queue[0].time - now).total_seconds()
            if seconds_to_go <= -self.settings.past_grace_seconds:
                removed = self.board_state.pop_head(platform)
                if removed is not None:
                    logger.debug(f"Removed departed run {removed.run} from platform {platform}")
                continue

            if seconds_to_go > 0 or len(queue) < 2:
                continue

            candidate = queue[min(len(queue) - 1, self.settings.next_enrich_index)]
            identity = (platform, candidate.key)
            if candidate.is_enriched or identity in self._in_flight:
                continue

            self._in_flight.add(identity)
            task = asyncio.create_task(
                self._enrich_and_append(platform, candidate, self.board_state.version)
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
            tasks.append(task)
        return tasks

    async def _enrich_and_append(
        self, platform: str, departure: Departure, version: int
    ) -> Departure | None:
        """Enrich one queued departure and push it to the platform's clients.

        The result is dropped if a new board was published in the meantime.
        """
        try:
            enriched = await self.enrichment_service.enrich(departure, self.colour_map)
        except Exception as e:
            logger.error(
                f"Failed to fetch details for run {departure.run} on platform {platform}, "
                f"will retry on next tick: {_describe_error(e)}"
            )
            return None
        finally:
            self._in_flight.discard((platform, departure.key))

        if self.board_state.version != version:
            logger.debug(f"Board was republished before details of run {departure.run} arrived")
            return None

        if not self.board_state.replace_departure(platform, enriched):
            logger.debug(f"Run {enriched.run} left platform {platform} before its details arrived")
            return None

        logger.debug(f"Fetched departure details for run {enriched.run} on platform {platform}")
        await self.broadcaster.broadcast_append(platform, enriched)
        return enriched

    async def wait_for_pending(self) -> None:
        """Wait until every background enrichment has settled."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel background enrichments."""
        for task in list(self._pending):
            task.cancel()
        await self.wait_for_pending()
        logger.info("Stopped board manager")
