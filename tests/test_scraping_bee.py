import httpx
import pytest

from product_importer.errors import ProviderError
from product_importer.services.scraping_bee import ScrapingBeeClient

PRODUCT_URL = "https://www.aliexpress.com/item/1.html"


def make_client(handler, api_key="test-key"):
    return ScrapingBeeClient(
        api_key=api_key,
        base_url="https://scraper.test/api/v1/",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_fetch_html_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["accept"] = request.headers.get("accept")
        return httpx.Response(200, text="<html><title>Hi</title></html>")

    html = await make_client(handler).fetch_html(PRODUCT_URL)

    assert html == "<html><title>Hi</title></html>"
    assert seen["params"] == {
        "api_key": "test-key",
        "url": PRODUCT_URL,
        "render_js": "true",
        "premium_proxy": "true",
    }
    assert seen["accept"] == "text/html"


@pytest.mark.asyncio
async def test_non_success_status_raises_with_code():
    client = make_client(lambda request: httpx.Response(403, text="Forbidden"))

    with pytest.raises(ProviderError) as exc_info:
        await client.fetch_html(PRODUCT_URL)

    assert exc_info.value.status_code == 403
    assert str(exc_info.value) == "Scraping failed: 403"


@pytest.mark.asyncio
async def test_network_error_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as exc_info:
        await make_client(handler).fetch_html(PRODUCT_URL)

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_missing_api_key_skips_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, text="")

    with pytest.raises(ProviderError, match="API key not configured"):
        await make_client(handler, api_key="").fetch_html(PRODUCT_URL)

    assert calls == []
