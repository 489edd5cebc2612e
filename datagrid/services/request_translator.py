"""Translate DataTables request parameters into data source directives."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from datagrid.services.column_registry import ColumnRegistry
from datagrid.services.data_sources import SORT_DIRECTIONS, DataSource

logger = logging.getLogger(__name__)

SEARCH_PREFIX = "sSearch"


def coerce_int(value: Any, default: int = 0) -> int:
    """Lenient integer coercion for request parameters."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def _is_present(value: Any) -> bool:
    return value is not None and str(value) != ""


class RequestTranslator:
    def __init__(self, columns: ColumnRegistry, parameters: Mapping[str, Any]):
        self.columns = columns
        self.parameters = parameters

    def wants_filter(self) -> bool:
        return any(
            key.startswith(SEARCH_PREFIX) and _is_present(value)
            for key, value in self.parameters.items()
        )

    def wants_sort(self) -> bool:
        return "iSortCol_0" in self.parameters

    def on_filter(self, data_source: DataSource) -> None:
        """Apply search terms as data source filters.

        A global ``sSearch`` term only filters on the first visible column;
        searching every visible column with OR is not supported. Without a
        global term each non-empty ``sSearch_<i>`` filters visible column
        ``i``.
        """
        visible = self.columns.visible()
        term = self.parameters.get(SEARCH_PREFIX)
        if _is_present(term):
            if visible:
                column = visible[0]
                data_source.add_filter(column.field, str(term))
                logger.debug("Global search on %s", column.field)
            return

        for index, column in enumerate(visible):
            term = self.parameters.get(f"{SEARCH_PREFIX}_{index}")
            if _is_present(term):
                data_source.add_filter(column.field, str(term))
                logger.debug("Column search on %s", column.field)

    def on_sort(self, data_source: DataSource) -> None:
        for index in range(len(self.columns.visible())):
            key = f"iSortCol_{index}"
            if key not in self.parameters:
                continue
            column = self.columns.get_by_offset(coerce_int(self.parameters[key]))
            direction = self._direction(self.parameters.get(f"sSortDir_{index}"))
            data_source.add_sort(column.field, direction)
            logger.debug("Sort %s %s", column.field, direction)

    @staticmethod
    def _direction(value: Any) -> str:
        if value is None:
            return "asc"
        direction = str(value).strip().lower()
        if direction not in SORT_DIRECTIONS:
            logger.warning("Unknown sort direction %r, using asc", value)
            return "asc"
        return direction
