from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from datagrid.errors import ColumnNotFound
from datagrid.services.column_registry import ColumnRegistry
from datagrid.services.render_filters import FilterChain


class RowRenderer:
    """Turn raw data source rows into display values keyed by column name."""

    def __init__(self, columns: ColumnRegistry, filters: FilterChain):
        self.columns = columns
        self.filters = filters

    def extract(self, raw_row: Any) -> dict[str, Any]:
        return {column.name: column.extract(raw_row) for column in self.columns}

    def apply_filter_chain(self, row: dict[str, Any]) -> dict[str, Any]:
        # Cells are matched to columns by position in the resolved order.
        columns = self.columns.all()
        filtered: dict[str, Any] = {}
        for index, (name, value) in enumerate(row.items()):
            if index >= len(columns):
                raise ColumnNotFound(f'Column with offset "{index}" not found')
            filtered[name] = self.filters.apply(value, columns[index])
        return filtered

    def render(self, raw_row: Any) -> dict[str, Any]:
        return self.apply_filter_chain(self.extract(raw_row))

    def render_all(self, raw_rows: Iterable[Any]) -> list[dict[str, Any]]:
        return [self.render(raw_row) for raw_row in raw_rows]
