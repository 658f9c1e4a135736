from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from product_importer.dependencies import get_provider, get_run_repository
from product_importer.errors import ProviderError, RunNotFoundError, UrlValidationError
from product_importer.repositories.run_repo import RunRepository
from product_importer.schemas.product import Product, ProductScrapeRequest
from product_importer.schemas.scrape import ScrapeRequest, ScrapeRunOut
from product_importer.services.scraping_bee import FetchProvider
from product_importer.viewmodels.scrape_vm import ScrapeViewModel, stream_events

router = APIRouter()


@router.post("/scrape", response_model=ScrapeRunOut)
async def start_scrape(
    data: ScrapeRequest,
    background_tasks: BackgroundTasks,
    repo: RunRepository = Depends(get_run_repository),
    provider: FetchProvider = Depends(get_provider),
):
    """Register a scrape run and process it after the response is sent."""
    try:
        vm = ScrapeViewModel.start(repo, data.urls)
    except UrlValidationError as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)

    background_tasks.add_task(vm.execute, provider)
    return vm.run.snapshot()


@router.get("/scrape/{run_id}", response_model=ScrapeRunOut)
async def get_run(run_id: str, repo: RunRepository = Depends(get_run_repository)):
    try:
        run = repo.get(run_id)
    except RunNotFoundError as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    return run.snapshot()


@router.get("/scrape/{run_id}/stream")
async def stream_run(run_id: str, repo: RunRepository = Depends(get_run_repository)):
    """SSE endpoint for real-time scraping progress."""
    try:
        run = repo.get(run_id)
    except RunNotFoundError as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    return EventSourceResponse(stream_events(run))


@router.post("/scrape/{run_id}/cancel", response_model=ScrapeRunOut)
async def cancel_run(run_id: str, repo: RunRepository = Depends(get_run_repository)):
    try:
        run = repo.get(run_id)
    except RunNotFoundError as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    run.cancel_event.set()
    return run.snapshot()


@router.post("/products/scrape", response_model=Product)
async def scrape_product(
    data: ProductScrapeRequest,
    provider: FetchProvider = Depends(get_provider),
):
    """Scrape a single product page and return the extracted fields."""
    if not data.url:
        return JSONResponse({"error": "Product URL is required"}, status_code=400)

    try:
        return await ScrapeViewModel.scrape_single(provider, data.url)
    except ProviderError as exc:
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code or 500)
