"""Web adapters for serving the board to display clients."""

from ptv_departures.adapters.web.starlette_app import StarletteWebAdapter, create_app

__all__ = ["StarletteWebAdapter", "create_app"]
