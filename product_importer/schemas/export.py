from enum import StrEnum

from pydantic import BaseModel


class ExportFormat(StrEnum):
    CSV = "csv"
    JSON = "json"


class ExportResult(BaseModel):
    filename: str
    format: ExportFormat
    product_count: int
