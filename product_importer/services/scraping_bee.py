import logging
from typing import Protocol

import httpx

from product_importer.config import settings
from product_importer.errors import ProviderError

logger = logging.getLogger(__name__)


class FetchProvider(Protocol):
    async def fetch_html(self, url: str) -> str: ...


class ScrapingBeeClient:
    """Fetch rendered product pages through the ScrapingBee proxy API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = settings.scraping_bee_api_key if api_key is None else api_key
        self.base_url = base_url or settings.scraping_bee_base_url
        self.timeout = timeout or settings.fetch_timeout
        self._transport = transport

    async def fetch_html(self, url: str) -> str:
        """Return the page body for ``url``. Raises ProviderError on any failure."""
        if not self.api_key:
            raise ProviderError("ScrapingBee API key not configured")

        params = {
            "api_key": self.api_key,
            "url": url,
            "render_js": str(settings.render_js).lower(),
            "premium_proxy": str(settings.premium_proxy).lower(),
        }

        logger.info("Scraping product from URL: %s", url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(
                    self.base_url,
                    params=params,
                    headers={"Accept": "text/html"},
                )
        except httpx.HTTPError as exc:
            logger.warning("ScrapingBee request failed for %s: %s", url, exc)
            raise ProviderError(f"Scraping failed: {exc.__class__.__name__}") from exc

        if not resp.is_success:
            logger.warning(
                "ScrapingBee API error for %s: %s %s", url, resp.status_code, resp.reason_phrase
            )
            raise ProviderError(f"Scraping failed: {resp.status_code}", status_code=resp.status_code)

        logger.info("Scraped HTML content for %s, length: %d", url, len(resp.text))
        return resp.text
