from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from datagrid.schemas.datatables import PageResponse, WidgetView
from datagrid.services.adapter import DataTablesAdapter
from datagrid.services.data_sources import DataSource


class DataTable:
    """One data source rendered through one adapter."""

    def __init__(self, data_source: DataSource, adapter: DataTablesAdapter | None = None):
        self.data_source = data_source
        self.adapter = adapter or DataTablesAdapter()

    @property
    def columns(self):
        return self.adapter.columns

    def get_response(self, parameters: Mapping[str, Any] | None = None) -> PageResponse:
        if parameters is not None:
            self.adapter.set_parameters(parameters)
        return self.adapter.get_response(self)

    def render(self) -> WidgetView:
        return self.adapter.render(self)
