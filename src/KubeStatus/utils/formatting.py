from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any

import ciso8601

log = logging.getLogger(__name__)


# Ordered from the largest unit below a day to the smallest.
_CLOCK_UNITS: tuple[int, ...] = (3600, 60, 1)
_SECONDS_PER_DAY = 86400


def format_duration(total_seconds: int | float) -> str:
    """Formats a number of seconds as ``SS``, ``MM:SS``, ``HH:MM:SS`` or ``D HH:MM:SS``.

    Every field is zero-padded to two digits except the leading day count.
    Negative inputs are clamped to zero.
    """
    remaining = max(0, int(total_seconds))

    prefix = ""
    if remaining >= _SECONDS_PER_DAY:
        days, remaining = divmod(remaining, _SECONDS_PER_DAY)
        prefix = f"{days} "
        units = _CLOCK_UNITS
    else:
        units = tuple(u for u in _CLOCK_UNITS if u <= remaining) or (1,)

    fields = []
    for unit in units:
        value, remaining = divmod(remaining, unit)
        fields.append(f"{value:02d}")
    return prefix + ":".join(fields)


def parse_timestamp(value: Any) -> datetime | None:
    """Parses an RFC 3339 timestamp (as emitted by kubectl) into an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = ciso8601.parse_datetime(value)
    except ValueError:
        log.debug("Could not parse timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seconds_since(value: Any) -> int | None:
    """Whole seconds elapsed between ``value`` and now, or None if unparsable."""
    created = parse_timestamp(value)
    if created is None:
        return None
    return int((datetime.now(timezone.utc) - created).total_seconds())


def format_cell_value(value: Any, hint: str = "text") -> str:
    """Converts an extracted value into the text shown in a table cell."""
    if value is None:
        return ""
    if hint == "list" and isinstance(value, (list, tuple)):
        return ",".join(format_cell_value(v) for v in value)
    if hint == "bool" or isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return ",".join(f"{k}={format_cell_value(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        return ",".join(format_cell_value(v) for v in value)
    return str(value)
