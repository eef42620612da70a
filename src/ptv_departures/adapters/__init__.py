"""Adapters layer - external system integrations."""

from ptv_departures.adapters.config import AppConfig, NetworkConfigurationLoader
from ptv_departures.adapters.ptv_api import PtvTimetableRepository

__all__ = ["AppConfig", "NetworkConfigurationLoader", "PtvTimetableRepository"]
