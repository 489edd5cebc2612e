from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from datagrid.config import settings
from datagrid.db import get_db
from datagrid.schemas.datatables import PageResponse
from datagrid.services.data_table import DataTable

router = APIRouter(prefix="/datatables", tags=["datatables"])
templates = Jinja2Templates(directory=settings.templates_dir)

DataTableFactory = Callable[[Session], DataTable]


class DataTableRegistry:
    _factories: dict[str, DataTableFactory] = {}

    @classmethod
    def register(cls, table_key: str, factory: DataTableFactory) -> None:
        if not table_key:
            raise ValueError("table_key is required")
        cls._factories[table_key] = factory

    @classmethod
    def unregister(cls, table_key: str) -> None:
        cls._factories.pop(table_key, None)

    @classmethod
    def exists(cls, table_key: str) -> bool:
        return table_key in cls._factories

    @classmethod
    def build(cls, table_key: str, db: Session) -> DataTable:
        factory = cls._factories.get(table_key)
        if factory is None:
            raise HTTPException(status_code=404, detail="Unregistered tableKey")
        return factory(db)


async def _request_params(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    return params


@router.api_route("/{table_key}/data", methods=["GET", "POST"], response_model=PageResponse)
def get_table_data(
    table_key: str,
    params: dict[str, Any] = Depends(_request_params),
    db: Session = Depends(get_db),
):
    data_table = DataTableRegistry.build(table_key, db)
    return data_table.get_response(params)


@router.get("/{table_key}", response_class=HTMLResponse)
def render_table(
    table_key: str,
    request: Request,
    db: Session = Depends(get_db),
):
    data_table = DataTableRegistry.build(table_key, db)
    if not data_table.adapter.get_option("sAjaxSource"):
        data_table.adapter.set_option(
            "sAjaxSource", str(request.url_for("get_table_data", table_key=table_key))
        )
    view = data_table.render()
    return templates.TemplateResponse(
        request,
        view.template,
        {"table": view},
    )
