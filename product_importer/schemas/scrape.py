from enum import StrEnum

from pydantic import BaseModel

from product_importer.schemas.product import Product


class RunStatus(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NoticeKind(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ScrapeRequest(BaseModel):
    urls: list[str] = []


class Notice(BaseModel):
    kind: NoticeKind
    message: str
    url: str | None = None  # set for per-URL notices


class ScrapeRunOut(BaseModel):
    id: str
    status: RunStatus
    total: int
    completed: int = 0
    progress: float = 0.0  # 0.0 - 1.0
    products: list[Product] = []
    notices: list[Notice] = []
