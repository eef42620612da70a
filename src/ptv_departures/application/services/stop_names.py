"""Display-name clean-up for stops and destinations."""

import re

_LOCALITY_SUFFIX = re.compile(r"-.*$", re.MULTILINE)
_STATION_SUFFIX = re.compile(r" Station", re.MULTILINE)
_COMPASS_PREFIXES = (
    ("North ", "N "),
    ("East ", "E "),
    ("West ", "W "),
    ("South ", "S "),
    ("Upper ", "U "),
)

MAX_DESTINATION_LENGTH = 14


def served_stop_name(name: str) -> str:
    """Strip the trailing locality suffix (everything from the first hyphen)."""
    return _LOCALITY_SUFFIX.sub("", name)


def skipped_stop_name(name: str) -> str:
    """Strip the " Station" suffix and the trailing locality suffix."""
    return served_stop_name(_STATION_SUFFIX.sub("", name))


def shorten_name(name: str) -> str:
    """Abbreviate a leading compass direction, e.g. "North Melbourne" -> "N Melbourne"."""
    for prefix, abbreviation in _COMPASS_PREFIXES:
        if name.startswith(prefix):
            return abbreviation + name[len(prefix) :]
    return name


def fit_destination(name: str) -> str:
    """Shorten a destination that does not fit on the display."""
    if len(name) > MAX_DESTINATION_LENGTH:
        return shorten_name(name)
    return name
