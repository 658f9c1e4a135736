from product_importer.schemas.export import ExportFormat, ExportResult
from product_importer.schemas.product import Product, ProductScrapeRequest
from product_importer.schemas.scrape import (
    Notice,
    NoticeKind,
    RunStatus,
    ScrapeRequest,
    ScrapeRunOut,
)

__all__ = [
    "ExportFormat",
    "ExportResult",
    "Notice",
    "NoticeKind",
    "Product",
    "ProductScrapeRequest",
    "RunStatus",
    "ScrapeRequest",
    "ScrapeRunOut",
]
