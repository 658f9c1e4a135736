import logging
from dataclasses import dataclass, field

from product_importer.config import settings
from product_importer.errors import RunNotFoundError
from product_importer.repositories.run_repo import RunRepository
from product_importer.schemas.export import ExportFormat, ExportResult
from product_importer.schemas.product import Product
from product_importer.services.export_service import ExportService

logger = logging.getLogger(__name__)


@dataclass
class ExportViewModel:
    products: list[Product] = field(default_factory=list)

    @classmethod
    def load(cls, repo: RunRepository, run_id: str | None = None) -> "ExportViewModel":
        try:
            run = repo.get(run_id or "latest")
        except RunNotFoundError:
            if run_id:
                raise
            return cls()
        return cls(products=list(run.products))

    def generate_csv(self) -> tuple[bytes, ExportResult]:
        content = ExportService().export_csv(self.products)
        result = ExportResult(
            filename=settings.export_filename,
            format=ExportFormat.CSV,
            product_count=len(self.products),
        )
        logger.info("Exported %d products to %s", result.product_count, result.filename)
        return content, result

    def generate_json(self) -> tuple[str, ExportResult]:
        content = ExportService().export_json(self.products)
        result = ExportResult(
            filename=settings.export_filename.rsplit(".", 1)[0] + ".json",
            format=ExportFormat.JSON,
            product_count=len(self.products),
        )
        return content, result
