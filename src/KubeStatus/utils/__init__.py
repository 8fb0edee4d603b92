from .formatting import (
    format_cell_value,
    format_duration,
    parse_timestamp,
    seconds_since,
)

__all__ = [
    "format_cell_value",
    "format_duration",
    "parse_timestamp",
    "seconds_since",
]
