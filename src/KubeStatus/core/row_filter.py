"""Row filtering for the dashboard.

A filter is either a plain regular expression, searched in every cell of a
row, or ``COLUMN: REGEX``, searched only in the named column. The column
prefix is matched case-insensitively against the current column headers; a
prefix that names no column is treated as part of a plain expression.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from KubeStatus.core.exceptions import InvalidFilterError
from KubeStatus.core.resource_registry import ColumnSpec
from KubeStatus.core.table_renderer import Row

log = logging.getLogger(__name__)

_COLUMN_PREFIX = re.compile(r"^\s*([A-Za-z][\w-]*)\s*:\s?(.*)$")


@dataclass(frozen=True)
class RowFilter:
    expression: str
    pattern: re.Pattern[str]
    column_index: int | None = None

    def matches(self, row: Row) -> bool:
        if self.column_index is not None:
            if self.column_index >= len(row.cells):
                return False
            return bool(self.pattern.search(row.cells[self.column_index].text))
        return any(self.pattern.search(cell.text) for cell in row.cells)

    def apply(self, rows: Iterable[Row]) -> list[Row]:
        return [row for row in rows if self.matches(row)]


def _compile(regex: str, expression: str) -> re.Pattern[str]:
    try:
        return re.compile(regex)
    except re.error as e:
        raise InvalidFilterError(f"Invalid filter '{expression}': {e}") from e


def compile_filter(expression: str, columns: Sequence[ColumnSpec]) -> RowFilter:
    """Compiles ``expression`` against the columns currently displayed."""
    match = _COLUMN_PREFIX.match(expression)
    if match:
        wanted = match.group(1).lower()
        for index, column in enumerate(columns):
            if column.name.lower() == wanted:
                return RowFilter(expression, _compile(match.group(2), expression), index)
        log.debug("Filter prefix '%s' names no column; matching whole rows", match.group(1))
    return RowFilter(expression, _compile(expression, expression))
