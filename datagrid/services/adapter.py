"""Server-side adapter for the DataTables jQuery widget."""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from datagrid.config import settings
from datagrid.schemas.datatables import ColumnRead, PageResponse, WidgetView
from datagrid.services.column_registry import ColumnRegistry
from datagrid.services.render_filters import (
    ESCAPE_FILTER_NAME,
    FilterChain,
    RenderFilterFunc,
    escape_filter,
)
from datagrid.services.request_translator import RequestTranslator, coerce_int
from datagrid.services.row_renderer import RowRenderer

if TYPE_CHECKING:
    from datagrid.services.data_table import DataTable

logger = logging.getLogger(__name__)


def default_options() -> dict[str, Any]:
    return {
        "iDisplayLength": settings.page_length,
        "iDeferLoading": settings.defer_loading,
        "sDom": settings.dom,
        "bProcessing": True,
        "bServerSide": True,
        "sAjaxSource": "",
        "sServerMethod": settings.server_method,
    }


class DataTablesAdapter:
    def __init__(self) -> None:
        self.id = f"datatable{uuid.uuid4().hex[:13]}"
        self.columns = ColumnRegistry()
        self.filters = FilterChain()
        self.parameters: dict[str, Any] = {}
        self.options = default_options()
        self.attributes: dict[str, str] = {}
        self._excluded_from_escaping: list[str] = []
        self.renderer = RowRenderer(self.columns, self.filters)

        self.set_auto_escape_filter(settings.escape_priority)

    def get_id(self) -> str:
        return self.id

    def set_id(self, table_id: str) -> None:
        self.id = table_id

    def get_column_registry(self) -> ColumnRegistry:
        return self.columns

    def set_parameters(self, parameters: Mapping[str, Any]) -> None:
        self.parameters = dict(parameters)

    def get_parameters(self) -> dict[str, Any]:
        return self.parameters

    def set_options(self, options: Mapping[str, Any]) -> None:
        self.options = dict(options)

    def get_options(self) -> dict[str, Any]:
        return self.options

    def set_option(self, name: str, value: Any) -> None:
        self.options[name] = value

    def get_option(self, name: str) -> Any:
        return self.options.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def set_attributes(self, attributes: Mapping[str, str]) -> None:
        for name, value in attributes.items():
            self.set_attribute(name, value)

    def get_attributes(self) -> dict[str, str]:
        self.attributes["id"] = self.id
        return self.attributes

    def set_filter(self, name: str, func: RenderFilterFunc, priority: int = 0) -> DataTablesAdapter:
        self.filters.set(name, func, priority)
        return self

    def get_filter(self, name: str) -> RenderFilterFunc:
        return self.filters.get(name)

    def set_auto_escape_filter(self, priority: int = 25) -> DataTablesAdapter:
        return self.set_filter(
            ESCAPE_FILTER_NAME,
            escape_filter(self.get_excluded_columns_for_escaping),
            priority,
        )

    def exclude_columns_from_escaping(self, columns: list[str]) -> DataTablesAdapter:
        """Skip auto-escaping for ``columns``.

        Useful for columns that carry markup such as an image tag. Content
        of these columns is emitted as-is, so whoever fills them must escape
        untrusted data or the table becomes an XSS vector.
        """
        self._excluded_from_escaping = list(columns)
        return self

    def reset_excluded_columns_from_escaping(self) -> DataTablesAdapter:
        self._excluded_from_escaping = []
        return self

    def get_excluded_columns_for_escaping(self) -> list[str]:
        return self._excluded_from_escaping

    def get_items(self, data_table: DataTable, offset: int, limit: int | None) -> list[dict[str, Any]]:
        """Fetch one page and run it through extractors and the filter chain."""
        raw_rows = data_table.data_source.get_items(offset, limit)
        return self.renderer.render_all(raw_rows)

    def get_response(self, data_table: DataTable) -> PageResponse:
        data_source = data_table.data_source
        offset = max(coerce_int(self.parameters.get("iDisplayStart"), 0), 0)
        limit: int | None = coerce_int(
            self.parameters.get("iDisplayLength"), self.get_option("iDisplayLength") or 10
        )
        if limit < 0:
            limit = None

        translator = RequestTranslator(self.columns, self.parameters)
        if translator.wants_filter():
            translator.on_filter(data_source)
        if translator.wants_sort():
            translator.on_sort(data_source)

        # Filters are already applied, so the total and displayed counts match.
        count = data_source.count()
        items = self.get_items(data_table, offset, limit)
        logger.debug(
            "Table %s page offset=%s limit=%s rows=%s total=%s",
            self.id,
            offset,
            limit,
            len(items),
            count,
        )

        return PageResponse(
            sEcho=coerce_int(self.parameters.get("sEcho"), 0),
            iTotalRecords=count,
            iTotalDisplayRecords=count,
            aaData=items,
        )

    def render(self, data_table: DataTable) -> WidgetView:
        """Collect everything the widget template needs to bootstrap the table."""
        items = None
        defer_loading = self.get_option("iDeferLoading")
        if defer_loading is not None:
            items = self.get_items(data_table, 0, int(defer_loading))

        columns = list(self.columns)
        widget_options = dict(self.options)
        widget_options["aoColumns"] = [
            {"mData": column.name, "sTitle": column.label, "bVisible": column.visible}
            for column in columns
        ]

        return WidgetView(
            id=self.id,
            options=self.options,
            options_encoded=json.dumps(widget_options).replace("</", "<\\/"),
            columns=[
                ColumnRead(
                    name=column.name,
                    label=column.label,
                    field=column.field,
                    position=column.position,
                    visible=column.visible,
                )
                for column in columns
            ],
            attributes=self.get_attributes(),
            items=items,
        )
