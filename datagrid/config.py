import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)


class Settings(BaseModel):
    database_url: str = Field(
        default=os.getenv("DATABASE_URL", "sqlite+pysqlite:///./datagrid.db")
    )
    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))
    templates_dir: str = Field(
        default=os.getenv("TEMPLATES_DIR", str(Path(__file__).resolve().parent / "templates"))
    )

    # Widget defaults applied to every new adapter
    page_length: int = Field(default=int(os.getenv("DATATABLES_PAGE_LENGTH", "10")))
    defer_loading: Optional[int] = Field(default=_optional_int("DATATABLES_DEFER_LOADING"))
    dom: str = Field(
        default=os.getenv(
            "DATATABLES_DOM",
            '<"top"iflp<"clear">>rt<"bottom"iflp<"clear">>',
        )
    )
    server_method: str = Field(default=os.getenv("DATATABLES_SERVER_METHOD", "POST"))
    escape_priority: int = Field(default=int(os.getenv("DATATABLES_ESCAPE_PRIORITY", "25")))

    class Config:
        frozen = True


settings = Settings()
