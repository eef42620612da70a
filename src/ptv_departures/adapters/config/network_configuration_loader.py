"""Loader for the [network] and [lines] tables of the TOML config."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ptv_departures.domain.models.network_configuration import NetworkConfiguration

if TYPE_CHECKING:
    from ptv_departures.adapters.config.app_config import AppConfig

logger = logging.getLogger(__name__)


class NetworkConfigurationLoader:
    """Builds a NetworkConfiguration from the TOML configuration file."""

    @staticmethod
    def load(config: AppConfig) -> NetworkConfiguration:
        """Load the network configuration named by ``config.config_file``.

        Without a config file the built-in Melbourne network is used.

        Raises:
            FileNotFoundError: If the configured file does not exist.
            ValueError: If a table has the wrong shape.
        """
        if not config.config_file:
            logger.info("No config file set, using built-in network defaults")
            return NetworkConfiguration()

        config_path = Path(config.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        return NetworkConfigurationLoader.from_dict(toml_data)

    @staticmethod
    def from_dict(toml_data: dict[str, Any]) -> NetworkConfiguration:
        """Build a NetworkConfiguration from parsed TOML data."""
        network = toml_data.get("network", {})
        if not isinstance(network, dict):
            raise ValueError("TOML config 'network' must be a table")
        defaults = NetworkConfiguration()
        lines = toml_data.get("lines", defaults.line_groups)
        if not isinstance(lines, dict):
            raise ValueError("TOML config 'lines' must be a table")

        kwargs: dict[str, Any] = {"line_groups": {str(k): str(v) for k, v in lines.items()}}
        if "cbd_station_ids" in network:
            kwargs["cbd_station_ids"] = frozenset(int(i) for i in network["cbd_station_ids"])
        for key in ("city_terminal_id", "terminal_interchange_id", "metro_route_type"):
            if key in network:
                kwargs[key] = int(network[key])
        for key in ("loop_label", "cross_city_group", "regional_group", "special_group"):
            if key in network:
                kwargs[key] = str(network[key])

        result = NetworkConfiguration(**kwargs)
        if result.city_terminal_id not in result.cbd_station_ids:
            raise ValueError("network.city_terminal_id must be one of network.cbd_station_ids")
        logger.info(
            f"Loaded network configuration: {len(result.cbd_station_ids)} CBD station(s), "
            f"{len(result.line_groups)} line(s)"
            + (" (defaults)" if result == defaults else "")
        )
        return result
