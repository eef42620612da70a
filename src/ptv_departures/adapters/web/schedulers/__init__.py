"""Schedulers for periodic board maintenance."""

from ptv_departures.adapters.web.schedulers.board_scheduler import BoardScheduler

__all__ = ["BoardScheduler"]
