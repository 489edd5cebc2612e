from fastapi import FastAPI

from datagrid.api.datatables import router as datatables_router
from datagrid.errors import register_error_handlers
from datagrid.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="datagrid")
    register_error_handlers(app)
    app.include_router(datatables_router)
    return app


app = create_app()
