"""Main entry point for the PTV departures board."""

import asyncio
import logging
import sys

import aiohttp

from ptv_departures.adapters.config import AppConfig, NetworkConfigurationLoader
from ptv_departures.adapters.ptv_api import PtvTimetableRepository
from ptv_departures.adapters.web import StarletteWebAdapter
from ptv_departures.adapters.web.broadcasters import BoardBroadcaster, ConnectionManager
from ptv_departures.adapters.web.schedulers import BoardScheduler
from ptv_departures.application.services import (
    BoardManager,
    DepartureEnrichmentService,
    DestinationResolver,
    PatternFetcher,
    resolve_station,
)
from ptv_departures.domain.errors import StationNotFoundError, TimetableApiError
from ptv_departures.domain.models import BoardState

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()

    try:
        network = NetworkConfigurationLoader.load(config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid network configuration: {e}")
        sys.exit(1)

    if not config.api_id or not config.api_key:
        logger.error("API_ID and API_KEY must be set.")
        logger.error("Set them in the environment or in a .env file.")
        sys.exit(1)

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        repository = PtvTimetableRepository(
            session,
            api_base=config.api_base,
            api_id=config.api_id,
            api_key=config.api_key,
            timeout_seconds=config.api_timeout_seconds,
        )

        try:
            station = await resolve_station(repository, config.station, config.route_type)
        except (StationNotFoundError, TimetableApiError) as e:
            logger.error(f"Could not resolve station '{config.station}': {e}")
            sys.exit(1)
        logger.info(f"Serving departures for {station.name} (stop {station.id})")

        # Initialize services
        pattern_fetcher = PatternFetcher(repository, station.id)
        resolver = DestinationResolver(
            network,
            station.id,
            pattern_fetcher,
            max_extension_depth=config.max_extension_depth,
        )
        enrichment_service = DepartureEnrichmentService(pattern_fetcher, resolver)

        board_state = BoardState()
        connections = ConnectionManager()
        broadcaster = BoardBroadcaster(
            connections, send_timeout_seconds=config.client_send_timeout_seconds
        )
        board_manager = BoardManager(
            repository,
            enrichment_service,
            board_state,
            broadcaster,
            network,
            station.id,
            settings=config.board_settings(),
        )

        # Build the first board before accepting clients
        if not await board_manager.full_refresh():
            logger.warning("Initial refresh failed, serving an empty board until the next one")

        scheduler = BoardScheduler(board_manager, config)
        web_adapter = StarletteWebAdapter(board_state, connections, scheduler, config)

        try:
            await web_adapter.start()
        except KeyboardInterrupt:
            logger.info("Shutting down...")
        finally:
            await web_adapter.stop()
            await board_manager.stop()


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
