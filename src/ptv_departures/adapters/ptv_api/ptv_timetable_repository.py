"""PTV timetable API repository adapter.

Uses the PTV Timetable API v3.
API Documentation: https://timetableapi.ptv.vic.gov.au/swagger/ui/index
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import aiohttp

from ptv_departures.adapters.api_request_logger import log_api_request
from ptv_departures.adapters.ptv_api.response_parser import (
    parse_departures,
    parse_pattern,
    parse_search,
)
from ptv_departures.adapters.ptv_api.url_signing import sign_url
from ptv_departures.domain.errors import TimetableApiError
from ptv_departures.domain.ports.timetable_repository import TimetableRepository

if TYPE_CHECKING:
    from collections.abc import Callable

    from ptv_departures.domain.models.station import Station
    from ptv_departures.domain.models.timetable import DeparturesResponse, PatternResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PtvTimetableRepository(TimetableRepository):
    """Adapter for the PTV timetable API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_base: str,
        api_id: str,
        api_key: str,
        timeout_seconds: float = 10,
    ) -> None:
        """Initialize the repository.

        Args:
            session: Shared aiohttp session.
            api_base: Base URL of the API including the version path.
            api_id: Developer id.
            api_key: Key used to sign requests.
            timeout_seconds: Total timeout for each request.
        """
        self._session = session
        self.api_base = api_base.rstrip("/")
        self._api_id = api_id
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def _log_error_response(self, response: aiohttp.ClientResponse, query: str) -> None:
        """Log error response details."""
        error_text = await response.text()
        error_body = error_text[:500] if error_text else "(empty response body)"
        content_type = response.headers.get("Content-Type", "unknown")
        logger.error(
            f"PTV API returned status {response.status} for {query}: "
            f"{error_body} (Content-Type: {content_type})"
        )

    async def _get_json(self, query: str) -> dict[str, Any]:
        """Send a signed GET request and return the decoded JSON body.

        Raises:
            TimetableApiError: On a non-200 status, a client error or a timeout.
        """
        url = sign_url(self.api_base, query, self._api_id, self._api_key)
        log_api_request("GET", url)
        try:
            async with self._session.get(url, timeout=self._timeout) as response:
                if response.status != 200:
                    await self._log_error_response(response, query)
                    raise TimetableApiError(
                        f"Got response ({response.status}) from PTV API for {query}",
                        status_code=response.status,
                    )
                data = await response.json()
        except TimeoutError as e:
            raise TimetableApiError(f"Timed out requesting {query}") from e
        except aiohttp.ClientError as e:
            raise TimetableApiError(f"Error requesting {query}: {e}") from e

        if not isinstance(data, dict):
            raise TimetableApiError(f"Unexpected response shape for {query}")
        return data

    async def _get_parsed(self, query: str, parse: Callable[[dict[str, Any]], T]) -> T:
        """Fetch a query and parse its body, treating a malformed body as an API error."""
        data = await self._get_json(query)
        try:
            return parse(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed PTV API response for {query}: {e!r}")
            raise TimetableApiError(f"Unexpected response shape for {query}: {e!r}") from e

    async def get_departures(self, station_id: int, route_type: int) -> DeparturesResponse:
        """Get all departures for a station, with their runs and routes."""
        return await self._get_parsed(
            f"/departures/route_type/{route_type}/stop/{station_id}?expand=Run&expand=Route",
            parse_departures,
        )

    async def get_pattern(self, route_type: int, run_ref: str) -> PatternResponse:
        """Get the full stopping pattern of a run, including skipped stops."""
        return await self._get_parsed(
            f"/pattern/run/{run_ref}/route_type/{route_type}"
            "?expand=Stop&expand=Run&include_skipped_stops=true",
            parse_pattern,
        )

    async def search_stations(self, term: str, route_type: int) -> list[Station]:
        """Search for stations matching a free-text term."""
        return await self._get_parsed(
            f"/search/{quote(term, safe='')}?route_types={route_type}&include_outlets=false",
            parse_search,
        )
