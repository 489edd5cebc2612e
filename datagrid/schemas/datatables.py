from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PageResponse(BaseModel):
    """Envelope the DataTables widget expects from its server-side source."""

    sEcho: int = 0
    iTotalRecords: int = 0
    iTotalDisplayRecords: int = 0
    aaData: list[dict[str, Any]] = Field(default_factory=list)


class ColumnRead(BaseModel):
    name: str
    label: str
    field: str
    position: int
    visible: bool


class WidgetView(BaseModel):
    template: str = "datatables/widget.html"
    id: str
    options: dict[str, Any]
    options_encoded: str
    columns: list[ColumnRead]
    attributes: dict[str, str]
    items: list[dict[str, Any]] | None = None
