"""12-factor configuration adapter using environment variables and TOML config."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ptv_departures.domain.models.board_settings import BoardSettings


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")

    # PTV timetable API configuration
    api_id: str = Field(default="", description="PTV timetable API developer id")
    api_key: str = Field(default="", description="PTV timetable API key used for signing")
    api_base: str = Field(
        default="https://timetableapi.ptv.vic.gov.au/v3",
        description="Base URL of the PTV timetable API",
    )
    api_timeout_seconds: float = Field(
        default=10, description="Timeout for each timetable API request in seconds"
    )

    # Station configuration
    station: str = Field(
        default="Flinders Street",
        description="Station id, or a search term resolved to a station at startup",
    )
    route_type: int = Field(default=0, description="Route type to show (0 = metro train)")

    # Board behaviour
    timezone: str = Field(
        default="Australia/Melbourne",
        description="IANA timezone the daily refresh is scheduled in",
    )
    refresh_hour: int = Field(default=0, description="Hour of the daily full refresh")
    refresh_minute: int = Field(default=5, description="Minute of the daily full refresh")
    past_grace_seconds: int = Field(
        default=60, description="How long a departed service stays on the board"
    )
    initial_enrich_count: int = Field(
        default=3, description="Departures per platform enriched on a full refresh"
    )
    max_extension_depth: int = Field(
        default=1, description="How many distributor runs a service may be extended through"
    )
    client_send_timeout_seconds: float = Field(
        default=5, description="Timeout for pushing a message to one display client"
    )

    static_dir: str | None = Field(
        default=None, description="Directory with the display front end to serve at /"
    )

    # TOML file with the [network] and [lines] tables
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file for network settings and the line table",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA timezone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone name: {v}") from e
        return v

    @field_validator("refresh_hour")
    @classmethod
    def validate_refresh_hour(cls, v: int) -> int:
        """Validate refresh hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError("refresh_hour must be between 0 and 23")
        return v

    @field_validator("refresh_minute")
    @classmethod
    def validate_refresh_minute(cls, v: int) -> int:
        """Validate refresh minute is between 0 and 59."""
        if not 0 <= v <= 59:
            raise ValueError("refresh_minute must be between 0 and 59")
        return v

    @field_validator("max_extension_depth", "initial_enrich_count")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        """Validate counters are not negative."""
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    def board_settings(self) -> BoardSettings:
        """Return the settings the board manager works with."""
        return BoardSettings(
            route_type=self.route_type,
            past_grace_seconds=self.past_grace_seconds,
            initial_enrich_count=self.initial_enrich_count,
        )
