"""Formatters for the display client payloads."""

from ptv_departures.adapters.web.formatters.departure_formatter import (
    append_message,
    format_departure,
    refresh_message,
)

__all__ = ["append_message", "format_departure", "refresh_message"]
