from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class DataTableError(LookupError):
    """Base class for data table configuration errors."""

    code = "datatable_error"


class ColumnNotFound(DataTableError):
    """Raised for an unknown column name or an out-of-range column offset."""

    code = "column_not_found"


class FilterNotFound(DataTableError):
    """Raised when a rendering filter name is not registered."""

    code = "filter_not_found"


def _error_payload(code: str, message: str, details: object, request_id: str | None):
    return {"code": code, "message": message, "details": details, "request_id": request_id}


def _request_id(request: Request) -> str:
    rid = getattr(request.state, "request_id", None)
    return str(rid) if rid else "unknown"


def _http_error_response(request: Request, status_code: int, detail: object) -> JSONResponse:
    code = f"http_{status_code}"
    message = "Request failed"
    details = None
    if isinstance(detail, dict):
        code = detail.get("code", code)
        message = detail.get("message", message)
        details = detail.get("details")
    elif isinstance(detail, str):
        message = detail
    else:
        details = detail
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(code, message, details, _request_id(request)),
    )


def register_error_handlers(app) -> None:
    @app.exception_handler(DataTableError)
    async def datatable_error_handler(request: Request, exc: DataTableError):
        # Misconfigured columns or filters are server-side faults.
        logger.error(
            "Data table configuration error on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return JSONResponse(
            status_code=500,
            content=_error_payload(exc.code, str(exc), None, _request_id(request)),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _http_error_response(request, exc.status_code, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if getattr(exc, "detail", None) is not None else "Request failed"
        return _http_error_response(request, exc.status_code, detail)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            extra={"request_id": _request_id(request)},
        )
        return JSONResponse(
            status_code=500,
            content=_error_payload(
                "internal_error", "Internal server error", None, _request_id(request)
            ),
        )
