import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from product_importer.config import settings
from product_importer.errors import ProviderError, UrlValidationError
from product_importer.schemas.product import Product
from product_importer.schemas.scrape import NoticeKind, RunStatus
from product_importer.services.extractor import extract_product, fallback_product
from product_importer.services.scraping_bee import FetchProvider

logger = logging.getLogger(__name__)

# (completed, total, product)
ProgressCallback = Callable[[int, int, Product], Awaitable[None]]
# (kind, message, url)
NoticeCallback = Callable[[NoticeKind, str, str | None], Awaitable[None]]


def clean_urls(urls: Iterable[str]) -> list[str]:
    """Drop blank entries. Raises UrlValidationError when nothing is left."""
    valid = [url for url in urls if url and url.strip()]
    if not valid:
        raise UrlValidationError("Please enter at least one product URL")
    return valid


class ScrapeOrchestrator:
    """Drive fetch + extraction over a list of URLs, reporting progress per URL.

    URLs are processed one at a time by default. With ``max_concurrency`` above
    one, fetches overlap up to that limit but results are still slotted by
    input position, so ``products`` always follows input order.
    """

    def __init__(
        self,
        provider: FetchProvider,
        on_progress: ProgressCallback | None = None,
        on_notice: NoticeCallback | None = None,
        max_concurrency: int | None = None,
        request_delay: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ):
        self.provider = provider
        self.on_progress = on_progress
        self.on_notice = on_notice
        self.max_concurrency = max(1, max_concurrency or settings.max_concurrency)
        self.request_delay = settings.request_delay if request_delay is None else request_delay
        self.cancel_event = cancel_event or asyncio.Event()
        self.status = RunStatus.IDLE
        self.total = 0
        self.completed = 0
        self._results: list[Product | None] = []

    @property
    def products(self) -> list[Product]:
        return [p for p in self._results if p is not None]

    @property
    def progress(self) -> float:
        return self.completed / self.total if self.total else 0.0

    def cancel(self) -> None:
        self.cancel_event.set()

    async def run(self, urls: Iterable[str]) -> list[Product]:
        valid = clean_urls(urls)

        self.status = RunStatus.RUNNING
        self.total = len(valid)
        self.completed = 0
        self._results = [None] * self.total
        logger.info("Starting product scraping for %d URLs", self.total)

        if self.max_concurrency == 1:
            for index, url in enumerate(valid):
                if self.cancel_event.is_set():
                    break
                await self._process(index, url)
        else:
            semaphore = asyncio.Semaphore(self.max_concurrency)

            async def worker(index: int, url: str) -> None:
                async with semaphore:
                    if not self.cancel_event.is_set():
                        await self._process(index, url)

            await asyncio.gather(*(worker(i, url) for i, url in enumerate(valid)))

        if self.cancel_event.is_set() and self.completed < self.total:
            self.status = RunStatus.CANCELLED
            logger.info("Scraping cancelled after %d/%d URLs", self.completed, self.total)
            await self._notify(
                NoticeKind.WARNING,
                f"Scraping cancelled after {self.completed} of {self.total} products",
            )
        else:
            self.status = RunStatus.COMPLETED
            logger.info("Scraping completed: %d products", self.completed)
            await self._notify(
                NoticeKind.SUCCESS, f"Successfully scraped {self.completed} products"
            )
        return self.products

    async def _process(self, index: int, url: str) -> None:
        logger.info("Scraping product %d/%d: %s", index + 1, self.total, url)
        if self.request_delay:
            await asyncio.sleep(self.request_delay)

        try:
            html = await self.provider.fetch_html(url)
        except ProviderError as exc:
            product = fallback_product(url)
            await self._notify(
                NoticeKind.WARNING,
                f"Scraping unavailable ({exc}). Using URL analysis instead.",
                url,
            )
        else:
            product = extract_product(html, url)

        self._results[index] = product
        self.completed += 1
        if self.on_progress:
            await self.on_progress(self.completed, self.total, product)

    async def _notify(self, kind: NoticeKind, message: str, url: str | None = None) -> None:
        if self.on_notice:
            await self.on_notice(kind, message, url)
