import pytest

from KubeStatus.core.exceptions import InvalidFilterError
from KubeStatus.core.resource_registry import lookup
from KubeStatus.core.row_filter import compile_filter
from KubeStatus.core.table_renderer import Cell, Row

COLUMNS = lookup("pod").columns


def _pod_row(name, status, node):
    texts = {"Name": name, "Status": status, "Node": node}
    return Row(tuple(Cell(texts.get(c.name, "")) for c in COLUMNS))


ROWS = [
    _pod_row("web-0", "Running", "node-a"),
    _pod_row("web-1", "Pending", "node-b"),
    _pod_row("db-0", "Running", "node-b"),
]


class TestRowFilter:
    def test_plain_regex_searches_every_cell(self):
        row_filter = compile_filter("node-b", COLUMNS)
        assert [r.cells[0].text for r in row_filter.apply(ROWS)] == ["web-1", "db-0"]

    def test_column_prefix_restricts_search(self):
        row_filter = compile_filter("status: ^Run", COLUMNS)
        assert row_filter.column_index == 2
        assert [r.cells[0].text for r in row_filter.apply(ROWS)] == ["web-0", "db-0"]

    def test_column_prefix_is_case_insensitive(self):
        row_filter = compile_filter("NAME:web", COLUMNS)
        assert [r.cells[0].text for r in row_filter.apply(ROWS)] == ["web-0", "web-1"]

    def test_unknown_prefix_is_part_of_the_regex(self):
        row_filter = compile_filter("color: blue", COLUMNS)
        assert row_filter.column_index is None
        assert row_filter.apply(ROWS) == []

    def test_invalid_regex(self):
        with pytest.raises(InvalidFilterError, match="web\\["):
            compile_filter("web[", COLUMNS)

    def test_invalid_regex_after_column_prefix(self):
        with pytest.raises(InvalidFilterError):
            compile_filter("name: (", COLUMNS)

    def test_short_rows_do_not_match_column_filters(self):
        row_filter = compile_filter("node: b", COLUMNS)
        assert not row_filter.matches(Row((Cell("web-0"),)))
