"""PTV timetable API adapters."""

from ptv_departures.adapters.ptv_api.ptv_timetable_repository import PtvTimetableRepository
from ptv_departures.adapters.ptv_api.url_signing import sign_url

__all__ = ["PtvTimetableRepository", "sign_url"]
