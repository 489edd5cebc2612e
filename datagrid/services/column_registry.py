"""Ordered, named column definitions for one data table instance.

The resolved column order drives three things that must agree with each
other: the order cells are extracted in, the column a cell is filtered
against, and the column a request's ``iSortCol_<i>`` offset points to.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any

from datagrid.errors import ColumnNotFound

logger = logging.getLogger(__name__)

Extractor = Callable[[Any], Any]


@dataclass
class Column:
    name: str
    label: str
    field: str
    position: int
    visible: bool
    extractor: Extractor

    def extract(self, row: Any) -> Any:
        return self.extractor(row)


def _read_value(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def default_extractor(name: str, constant: Any = None) -> Extractor:
    """Build the extractor used when a column has no callable of its own.

    A ``str`` or ``int`` constant is returned for every row. Otherwise the
    row's value for ``name`` is passed through, with date/time values
    rendered as ISO-8601 strings.
    """

    def extract(row: Any) -> Any:
        if isinstance(constant, (str, int)) and not isinstance(constant, bool):
            return constant
        value = _read_value(row, name)
        if isinstance(value, (datetime, date, time)):
            return value.isoformat()
        return value

    return extract


class ColumnRegistry:
    def __init__(self, columns: Iterable[Mapping[str, Any]] = ()):
        self._columns: dict[str, Column] = {}
        for spec in columns:
            self.add(**spec)

    def add(
        self,
        name: str,
        label: str | None = None,
        field: str | None = None,
        position: int | None = None,
        visible: bool | None = None,
        extractor: Extractor | str | int | None = None,
    ) -> ColumnRegistry:
        """Register a column, or merge the given attributes into an existing one.

        Arguments left as ``None`` keep the current value of an existing
        column, so re-adding a name never drops attributes set earlier.
        """
        extractor_fn = extractor
        if extractor is not None and not callable(extractor):
            extractor_fn = default_extractor(name, extractor)

        existing = self._columns.get(name)
        if existing is not None:
            if label is not None:
                existing.label = label
            if field is not None:
                existing.field = field
            if position is not None:
                existing.position = position
            if visible is not None:
                existing.visible = visible
            if extractor_fn is not None:
                existing.extractor = extractor_fn
            logger.debug("Merged column %s", name)
            return self

        self._columns[name] = Column(
            name=name,
            label=label if label is not None else name,
            field=field if field is not None else name,
            position=position if position is not None else len(self._columns) + 1,
            visible=True if visible is None else visible,
            extractor=extractor_fn or default_extractor(name),
        )
        return self

    def get(self, name: str) -> Column:
        column = self._columns.get(name)
        if column is None:
            raise ColumnNotFound(f'Column "{name}" not found')
        return column

    def has(self, name: str) -> bool:
        return name in self._columns

    def get_by_offset(self, offset: int) -> Column:
        columns = self.all()
        if offset < 0 or offset >= len(columns):
            raise ColumnNotFound(f'Column with offset "{offset}" not found')
        return columns[offset]

    def visible(self) -> list[Column]:
        return [column for column in self.all() if column.visible is True]

    def all(self) -> list[Column]:
        """Return every column in the resolved order.

        When at least one column is hidden, hidden columns come first and
        visible ones follow, each group in stored order; positions are not
        consulted. When every column is visible, columns are sorted by
        position, then name.
        """
        stored = list(self._columns.values())
        hidden = [column for column in stored if column.visible is not True]
        if hidden:
            return hidden + [column for column in stored if column.visible is True]
        return sorted(stored, key=lambda column: (column.position, column.name))

    def keys(self) -> set[str]:
        return set(self._columns)

    def clear(self) -> None:
        self._columns.clear()

    def set_label(self, name: str, label: str) -> ColumnRegistry:
        self.get(name).label = label
        return self

    def get_label(self, name: str) -> str:
        return self.get(name).label

    def set_field(self, name: str, field: str) -> ColumnRegistry:
        self.get(name).field = field
        return self

    def get_field(self, name: str) -> str:
        return self.get(name).field

    def set_position(self, name: str, position: int) -> ColumnRegistry:
        self.get(name).position = position
        return self

    def get_position(self, name: str) -> int:
        return self.get(name).position

    def set_visible(self, name: str, visible: bool) -> ColumnRegistry:
        self.get(name).visible = visible
        return self

    def get_visible(self, name: str) -> bool:
        return self.get(name).visible

    def set_extractor(self, name: str, extractor: Extractor | str | int) -> ColumnRegistry:
        column = self.get(name)
        if not callable(extractor):
            extractor = default_extractor(name, extractor)
        column.extractor = extractor
        return self

    def get_extractor(self, name: str) -> Extractor:
        return self.get(name).extractor

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.all())
