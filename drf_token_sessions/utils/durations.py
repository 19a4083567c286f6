"""Parsing of compact lifetime specs such as ``"15m"`` or ``"7d"``."""

import re
from datetime import timedelta

from drf_token_sessions.exceptions import InvalidDurationFormat

DURATION_PATTERN = re.compile(r"(\d+)([smhd])")

UNIT_KWARGS = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(spec: str) -> timedelta:
    """
    Converts ``<integer><unit>`` into a timedelta.

    Raises:
        InvalidDurationFormat: If the spec is not a string of that shape.
    """
    match = DURATION_PATTERN.fullmatch(spec) if isinstance(spec, str) else None
    if not match:
        raise InvalidDurationFormat(f"Invalid duration format: {spec!r}")

    value, unit = match.groups()
    return timedelta(**{UNIT_KWARGS[unit]: int(value)})
