import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from product_importer.config import settings
from product_importer.repositories.run_repo import run_repository
from product_importer.routers import export, scrape

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.scraping_bee_api_key:
        logger.warning("ScrapingBee API key not configured; scrapes will fall back to URL analysis")

    yield

    # session state does not outlive the process
    run_repository.clear()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# routers
app.include_router(scrape.router)
app.include_router(export.router)


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name}
