"""Ports (interfaces) for the ports-and-adapters architecture."""

from ptv_departures.domain.ports.timetable_repository import TimetableRepository

__all__ = ["TimetableRepository"]
