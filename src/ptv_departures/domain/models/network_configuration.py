"""Network configuration domain model."""

from dataclasses import dataclass, field

# Flagstaff, Melbourne Central, Parliament, Southern Cross, Flinders Street
DEFAULT_CBD_STATION_IDS = frozenset({1068, 1120, 1155, 1181, 1071})
DEFAULT_CITY_TERMINAL_ID = 1071
DEFAULT_TERMINAL_INTERCHANGE_ID = 1181

# Line code (route_gtfs_id without its "2-" prefix) -> service group
DEFAULT_LINE_GROUPS = {
    "ALM": "burnley",
    "BEL": "burnley",
    "GLW": "burnley",
    "LIL": "burnley",
    "CRB": "dandenong",
    "PKM": "dandenong",
    "HBE": "cliftonhill",
    "MDD": "cliftonhill",
    "CGB": "northern",
    "SUY": "northern",
    "UFD": "northern",
    "FKN": "crosscity",
    "WBE": "crosscity",
    "WMN": "crosscity",
    "SDM": "sandringham",
    "STY": "stonypoint",
    "CCL": "citycircle",
}


@dataclass(frozen=True)
class NetworkConfiguration:
    """Station ids and service groups that drive destination resolution."""

    cbd_station_ids: frozenset[int] = DEFAULT_CBD_STATION_IDS
    city_terminal_id: int = DEFAULT_CITY_TERMINAL_ID
    terminal_interchange_id: int = DEFAULT_TERMINAL_INTERCHANGE_ID
    loop_label: str = "City Loop"
    cross_city_group: str = "crosscity"
    regional_group: str = "vline"
    special_group: str = "special"
    metro_route_type: int = 0
    line_groups: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LINE_GROUPS))

    def is_cbd_station(self, stop_id: int) -> bool:
        """Check whether a stop is one of the CBD interchange stations."""
        return stop_id in self.cbd_station_ids
