from __future__ import annotations

import html
import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

from datagrid.errors import FilterNotFound
from datagrid.services.column_registry import Column

logger = logging.getLogger(__name__)

RenderFilterFunc = Callable[[Any, Column], Any]

ESCAPE_FILTER_NAME = "escape"


@dataclass(frozen=True)
class RenderFilter:
    name: str
    func: RenderFilterFunc
    priority: int = 0


class FilterChain:
    """Named rendering filters applied to every cell in ascending priority.

    The ordered chain is cached and only re-sorted after ``set`` or
    ``remove`` changed the registered set.
    """

    def __init__(self) -> None:
        self._filters: dict[str, RenderFilter] = {}
        self._ordered: list[RenderFilter] = []
        self._dirty = False

    def set(self, name: str, func: RenderFilterFunc, priority: int = 0) -> FilterChain:
        self._filters[name] = RenderFilter(name=name, func=func, priority=priority)
        self._dirty = True
        return self

    def get(self, name: str) -> RenderFilterFunc:
        render_filter = self._filters.get(name)
        if render_filter is None:
            raise FilterNotFound(f'Cannot find a filter with the name "{name}"')
        return render_filter.func

    def has(self, name: str) -> bool:
        return name in self._filters

    def remove(self, name: str) -> FilterChain:
        if name not in self._filters:
            raise FilterNotFound(f'Cannot find a filter with the name "{name}"')
        del self._filters[name]
        self._dirty = True
        return self

    def names(self) -> list[str]:
        return [render_filter.name for render_filter in self._prepared()]

    def apply(self, value: Any, column: Column) -> Any:
        for render_filter in self._prepared():
            value = render_filter.func(value, column)
        return value

    def _prepared(self) -> list[RenderFilter]:
        if self._dirty:
            # sorted() is stable, so equal priorities keep registration order
            self._ordered = sorted(self._filters.values(), key=lambda item: item.priority)
            self._dirty = False
            logger.debug("Prepared render filter chain: %s", [f.name for f in self._ordered])
        return self._ordered


def escape_html(value: str) -> str:
    """Escape ``& < > "`` for HTML. Single quotes stay as-is."""
    return html.escape(value, quote=False).replace('"', "&quot;")


def escape_filter(excluded: Callable[[], Collection[str]]) -> RenderFilterFunc:
    """Build the auto-escape filter.

    ``excluded`` is called per cell so later changes to the exclusion list
    apply without re-registering the filter. Columns named there are
    returned untouched and must be escaped by whoever fills them. Every
    other cell comes out as a string, with ``None`` rendered empty.
    """

    def escape(value: Any, column: Column) -> Any:
        if column.name in excluded():
            return value
        if value is None:
            return ""
        return escape_html(value if isinstance(value, str) else str(value))

    return escape
