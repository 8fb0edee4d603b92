from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal, Sequence

from rich.cells import cell_len
from rich.text import Text

from KubeStatus.core.exceptions import PathExtractionError
from KubeStatus.core.objects import KubeObject
from KubeStatus.core.path_extractor import extract
from KubeStatus.core.resource_registry import NAMESPACE, ColumnSpec, ResourceType
from KubeStatus.utils.formatting import format_cell_value

log = logging.getLogger(__name__)

GUTTER = "  "
HEADER_STYLE = "bold reverse"
EMPTY_MESSAGE = "no objects"
EMPTY_STYLE = "italic dim"


@dataclass(frozen=True)
class Cell:
    text: str
    align: Literal["left", "right"] = "left"
    style: str | None = None
    min_width: int = 0


@dataclass(frozen=True)
class Row:
    cells: tuple[Cell, ...]
    source: KubeObject | None = None


@dataclass(frozen=True)
class RenderedRow:
    """One output line plus the object it was rendered from."""

    text: Text
    source: KubeObject | None
    cells: tuple[str, ...] = ()

    @property
    def plain(self) -> str:
        return self.text.plain


@dataclass(frozen=True)
class RenderedTable:
    header: RenderedRow
    rows: tuple[RenderedRow, ...]
    widths: tuple[int, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        """True when the table only holds the "no objects" placeholder."""
        return len(self.rows) == 1 and self.rows[0].source is None

    def object_at(self, index: int | None) -> KubeObject | None:
        """Resolves a row index (e.g. the cursor position) back to its object."""
        if index is None or not 0 <= index < len(self.rows):
            return None
        return self.rows[index].source


def _pad(cell: Cell, width: int) -> str:
    padding = " " * max(0, width - cell_len(cell.text))
    return padding + cell.text if cell.align == "right" else cell.text + padding


def _render_line(
    cells: Sequence[Cell], widths: Sequence[int], base_style: str | None = None
) -> Text:
    line = Text(style=base_style or "")
    for i, width in enumerate(widths):
        cell = cells[i] if i < len(cells) else Cell("")
        if i:
            line.append(GUTTER)
        line.append(_pad(cell, width), style=cell.style or "")
    return line


def compute_widths(header: Row, rows: Iterable[Row]) -> tuple[int, ...]:
    """Column width = max(header text, every cell text, declared minimum)."""
    widths = [max(cell_len(c.text), c.min_width) for c in header.cells]
    for row in rows:
        for i, cell in enumerate(row.cells):
            needed = max(cell_len(cell.text), cell.min_width)
            if i >= len(widths):
                widths.append(needed)
            elif needed > widths[i]:
                widths[i] = needed
    return tuple(widths)


def render(header: Row, rows: Sequence[Row]) -> RenderedTable:
    """Lays out ``rows`` under ``header`` as aligned, styled lines.

    An empty ``rows`` renders a single informational row whose source is None.
    """
    header_cells = tuple(
        Cell(c.text, align=c.align, style=HEADER_STYLE, min_width=c.min_width)
        for c in header.cells
    )
    widths = compute_widths(Row(header_cells), rows)
    if rows:
        rendered_rows = tuple(
            RenderedRow(
                _render_line(row.cells, widths),
                row.source,
                tuple(c.text for c in row.cells),
            )
            for row in rows
        )
    else:
        rendered_rows = (RenderedRow(Text(EMPTY_MESSAGE, style=EMPTY_STYLE), None),)

    return RenderedTable(
        header=RenderedRow(
            _render_line(header_cells, widths, base_style=HEADER_STYLE),
            None,
            tuple(c.text for c in header_cells),
        ),
        rows=rendered_rows,
        widths=widths,
    )


def table_columns(resource_type: ResourceType, show_namespace: bool) -> tuple[ColumnSpec, ...]:
    """Columns for ``resource_type``, with a leading Namespace column across namespaces."""
    if show_namespace and resource_type.has_namespace:
        return (NAMESPACE, *resource_type.columns)
    return resource_type.columns


def header_row(columns: Sequence[ColumnSpec]) -> Row:
    return Row(
        tuple(Cell(c.name.upper(), align=c.align, min_width=c.min_width) for c in columns)
    )


def cell_text(column: ColumnSpec, obj: KubeObject) -> str:
    """Extracts and formats a single cell; extraction failures render blank."""
    try:
        value = extract(column.program, obj.raw)
    except PathExtractionError as e:
        log.debug("Column '%s' of %s: %s", column.name, obj.qualified_name, e)
        return ""
    return format_cell_value(value, column.format_hint)


def build_row(columns: Sequence[ColumnSpec], obj: KubeObject) -> Row:
    return Row(
        tuple(
            Cell(cell_text(c, obj), align=c.align, style=c.style, min_width=c.min_width)
            for c in columns
        ),
        source=obj,
    )


def build_rows(columns: Sequence[ColumnSpec], objects: Iterable[KubeObject]) -> list[Row]:
    return [build_row(columns, obj) for obj in objects]
