"""Service package exports."""

from __future__ import annotations

from datagrid.services.adapter import DataTablesAdapter
from datagrid.services.column_registry import Column, ColumnRegistry
from datagrid.services.data_sources import ArrayDataSource, DataSource, QueryDataSource
from datagrid.services.data_table import DataTable
from datagrid.services.render_filters import FilterChain

__all__ = [
    "ArrayDataSource",
    "Column",
    "ColumnRegistry",
    "DataSource",
    "DataTable",
    "DataTablesAdapter",
    "FilterChain",
    "QueryDataSource",
]
