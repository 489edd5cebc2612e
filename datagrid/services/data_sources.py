"""Data sources a data table pages through.

A data source accumulates filter and sort directives and only evaluates
them when ``count`` or ``get_items`` is called.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from sqlalchemy import inspect
from sqlalchemy.orm import Query

from datagrid.errors import ColumnNotFound

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


class DataSource(Protocol):
    def add_filter(self, field: str, term: str) -> None: ...

    def add_sort(self, field: str, direction: str) -> None: ...

    def count(self) -> int: ...

    def get_items(self, offset: int, limit: int | None) -> list[Any]: ...


class _SortKey:
    """Orders ``None`` before any other value and flips for descending sorts."""

    __slots__ = ("value", "descending")

    def __init__(self, value: Any, descending: bool):
        self.value = value
        self.descending = descending

    def _less(self, other: _SortKey) -> bool:
        if self.value is None or other.value is None:
            return self.value is None and other.value is not None
        try:
            return self.value < other.value
        except TypeError:
            return str(self.value) < str(other.value)

    def __lt__(self, other: _SortKey) -> bool:
        if self.descending:
            return other._less(self)
        return self._less(other)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _SortKey) and self.value == other.value


class ArrayDataSource:
    """In-memory rows. Filters are case-insensitive substring matches."""

    def __init__(self, rows: Iterable[Mapping[str, Any]]):
        self._rows = list(rows)
        self._filters: list[tuple[str, str]] = []
        self._sorts: list[tuple[str, str]] = []

    def add_filter(self, field: str, term: str) -> None:
        self._filters.append((field, str(term)))

    def add_sort(self, field: str, direction: str) -> None:
        self._sorts.append((field, direction))

    def _matches(self, row: Mapping[str, Any]) -> bool:
        for field, term in self._filters:
            value = row.get(field)
            if value is None or term.lower() not in str(value).lower():
                return False
        return True

    def _result(self) -> list[Mapping[str, Any]]:
        rows = [row for row in self._rows if self._matches(row)]
        if self._sorts:
            rows.sort(
                key=lambda row: tuple(
                    _SortKey(row.get(field), direction == "desc")
                    for field, direction in self._sorts
                )
            )
        return rows

    def count(self) -> int:
        return len(self._result())

    def get_items(self, offset: int, limit: int | None) -> list[Mapping[str, Any]]:
        rows = self._result()
        end = None if limit is None else offset + limit
        return [dict(row) for row in rows[offset:end]]

    def __len__(self) -> int:
        return self.count()


class QueryDataSource:
    """SQLAlchemy ``Query`` backed rows.

    Fields resolve through ``fields`` first, then through attributes of the
    query's primary entity.
    """

    def __init__(self, query: Query, fields: Mapping[str, Any] | None = None):
        self._query = query
        self._fields = dict(fields or {})

    @property
    def query(self) -> Query:
        return self._query

    def _expression(self, field: str) -> Any:
        if field in self._fields:
            return self._fields[field]
        entity = self._query.column_descriptions[0].get("entity")
        if entity is not None and hasattr(entity, field):
            return getattr(entity, field)
        raise ColumnNotFound(f'Field "{field}" has no query expression')

    def add_filter(self, field: str, term: str) -> None:
        expression = self._expression(field)
        term = str(term)
        pattern = term.replace("*", "%") if "*" in term else f"%{term}%"
        self._query = self._query.filter(expression.ilike(pattern))
        logger.debug("Added query filter %s ILIKE %r", field, pattern)

    def add_sort(self, field: str, direction: str) -> None:
        expression = self._expression(field)
        self._query = self._query.order_by(
            expression.desc() if direction == "desc" else expression.asc()
        )

    def count(self) -> int:
        return self._query.order_by(None).count()

    def get_items(self, offset: int, limit: int | None) -> list[dict[str, Any]]:
        query = self._query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [_row_to_dict(row) for row in query.all()]

    def __len__(self) -> int:
        return self.count()


def _row_to_dict(row: Any) -> dict[str, Any]:
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        return dict(mapping)
    mapper = inspect(row).mapper
    return {attr.key: getattr(row, attr.key) for attr in mapper.column_attrs}
