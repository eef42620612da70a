"""Timetable exception definitions."""

from __future__ import annotations


def reason_for_status(status_code: int | None) -> str:
    """Describe an upstream HTTP status code."""
    if status_code == 429:
        return "Rate limit exceeded"
    if status_code == 502:
        return "Bad gateway (server error)"
    if status_code == 503:
        return "Service unavailable"
    if status_code == 504:
        return "Gateway timeout"
    if status_code is not None:
        return f"HTTP {status_code}"
    return "Unknown error"


class TimetableApiError(Exception):
    """Raised when the upstream timetable API cannot answer a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def reason(self) -> str:
        """Human-readable reason derived from the status code."""
        return reason_for_status(self.status_code)


class StationNotFoundError(Exception):
    """Raised when the configured station cannot be resolved."""


__all__ = [
    "StationNotFoundError",
    "TimetableApiError",
    "reason_for_status",
]
