import asyncio
import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from product_importer.repositories.run_repo import RunRepository, ScrapeRun
from product_importer.schemas.product import Product
from product_importer.schemas.scrape import Notice, NoticeKind, RunStatus
from product_importer.services.extractor import extract_product
from product_importer.services.orchestrator import ScrapeOrchestrator, clean_urls
from product_importer.services.scraping_bee import FetchProvider

logger = logging.getLogger(__name__)


@dataclass
class ScrapeViewModel:
    run: ScrapeRun

    @classmethod
    def start(cls, repo: RunRepository, urls: list[str]) -> "ScrapeViewModel":
        """Validate the submitted URLs and register a new run. No network calls."""
        valid = clean_urls(urls)
        run = repo.create(valid)
        logger.info("Created scrape run %s for %d URLs", run.id, run.total)
        return cls(run=run)

    async def execute(self, provider: FetchProvider) -> list[Product]:
        run = self.run

        async def on_progress(completed: int, total: int, product: Product):
            run.completed = completed
            run.products = orchestrator.products
            run.publish({
                "status": "progress",
                "progress": completed / total,
                "completed": completed,
                "total": total,
                "product": product.model_dump(mode="json", by_alias=True),
            })

        async def on_notice(kind: NoticeKind, message: str, url: str | None):
            notice = Notice(kind=kind, message=message, url=url)
            run.notices.append(notice)
            run.publish({"status": "notice", **notice.model_dump(mode="json")})

        orchestrator = ScrapeOrchestrator(
            provider,
            on_progress=on_progress,
            on_notice=on_notice,
            cancel_event=run.cancel_event,
        )

        run.status = RunStatus.RUNNING
        run.publish({"status": "running", "total": run.total})
        try:
            await orchestrator.run(run.urls)
        except Exception:
            logger.exception("Error during scraping run %s", run.id)
            await on_notice(NoticeKind.ERROR, "An error occurred while scraping products", None)

        run.products = orchestrator.products
        run.completed = orchestrator.completed
        run.status = (
            RunStatus.CANCELLED if orchestrator.status == RunStatus.CANCELLED else RunStatus.COMPLETED
        )
        run.publish({"status": "done", "result": run.status.value, "count": len(run.products)})
        return run.products

    @classmethod
    async def scrape_single(cls, provider: FetchProvider, url: str) -> Product:
        """Fetch and extract one URL. ProviderError propagates to the caller."""
        html = await provider.fetch_html(url)
        return extract_product(html, url)


async def stream_events(run: ScrapeRun, heartbeat: float = 30) -> AsyncIterator[dict]:
    """Replay a run's events, then follow new ones until the run finishes."""
    cursor = 0
    while True:
        while cursor < len(run.events):
            yield {"data": json.dumps(run.events[cursor])}
            cursor += 1
        if run.finished:
            break

        waiter = run.changed
        try:
            await asyncio.wait_for(waiter.wait(), timeout=heartbeat)
        except asyncio.TimeoutError:
            yield {"data": json.dumps({"status": "heartbeat"})}
