"""Configuration adapters."""

from ptv_departures.adapters.config.app_config import AppConfig
from ptv_departures.adapters.config.network_configuration_loader import NetworkConfigurationLoader

__all__ = ["AppConfig", "NetworkConfigurationLoader"]
