import asyncio
import uuid
from dataclasses import dataclass, field

from product_importer.errors import RunNotFoundError
from product_importer.schemas.product import Product
from product_importer.schemas.scrape import Notice, RunStatus, ScrapeRunOut


@dataclass
class ScrapeRun:
    """In-memory state of one scrape run, shared between the worker and readers."""

    id: str
    urls: list[str]
    status: RunStatus = RunStatus.IDLE
    completed: int = 0
    products: list[Product] = field(default_factory=list)
    notices: list[Notice] = field(default_factory=list)
    events: list[dict] = field(default_factory=list)  # replayable SSE payloads
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    changed: asyncio.Event = field(default_factory=asyncio.Event)

    @property
    def total(self) -> int:
        return len(self.urls)

    @property
    def progress(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def finished(self) -> bool:
        return self.status in (RunStatus.COMPLETED, RunStatus.CANCELLED)

    def publish(self, event: dict) -> None:
        self.events.append(event)
        # wake current stream readers, then re-arm for the next event
        self.changed.set()
        self.changed = asyncio.Event()

    def snapshot(self) -> ScrapeRunOut:
        return ScrapeRunOut(
            id=self.id,
            status=self.status,
            total=self.total,
            completed=self.completed,
            progress=self.progress,
            products=list(self.products),
            notices=list(self.notices),
        )


class RunRepository:
    """Holds the current session's scrape runs. Starting a run resets the session."""

    def __init__(self):
        self._runs: dict[str, ScrapeRun] = {}
        self._latest_id: str | None = None

    def create(self, urls: list[str]) -> ScrapeRun:
        for run in self._runs.values():
            run.cancel_event.set()
        self._runs.clear()

        run = ScrapeRun(id=uuid.uuid4().hex, urls=urls)
        self._runs[run.id] = run
        self._latest_id = run.id
        return run

    def get(self, run_id: str) -> ScrapeRun:
        if run_id == "latest":
            run_id = self._latest_id or ""
        run = self._runs.get(run_id)
        if run is None:
            raise RunNotFoundError(f"Scrape run {run_id or 'latest'} not found")
        return run

    def latest(self) -> ScrapeRun | None:
        return self._runs.get(self._latest_id) if self._latest_id else None

    def clear(self) -> None:
        for run in self._runs.values():
            run.cancel_event.set()
        self._runs.clear()
        self._latest_id = None


run_repository = RunRepository()
