"""
Pytest configuration and fixtures for product importer tests
"""

import pytest
from fastapi.testclient import TestClient

from product_importer.dependencies import get_provider, get_run_repository
from product_importer.errors import ProviderError
from product_importer.main import app
from product_importer.repositories.run_repo import RunRepository

PRODUCT_PAGE_HTML = """<html><head>
<title>Wireless Mouse 2.4G - AliExpress</title>
<meta property="og:title" content="Ergonomic Wireless Mouse" />
<meta property="og:image" content="//ae01.alicdn.com/kf/mouse.jpg" />
<meta name="description" content="  A comfortable &amp; silent wireless mouse.  " />
</head><body>
<div class="product-price-current">US $12.50</div>
<span class="price--original">US $20.00</span>
<div class="overview-rating-average">4.7</div>
<span>1,234 reviews</span>
</body></html>"""

EMBEDDED_JSON_HTML = r"""<html><body><script>
window.runParams = {"price":"9,999.00","mainImage":"https:\/\/ae01.alicdn.com\/kf\/x.jpg","rating":4.5,"reviewCount":"1,024"};
</script></body></html>"""


class FakeProvider:
    """Serves canned HTML per URL; URLs mapped to an exception raise it instead."""

    def __init__(self, pages: dict, default: str = "<html></html>"):
        self.pages = pages
        self.default = default
        self.calls: list[str] = []

    async def fetch_html(self, url: str) -> str:
        self.calls.append(url)
        page = self.pages.get(url, self.default)
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def product_html():
    return PRODUCT_PAGE_HTML


@pytest.fixture
def json_html():
    return EMBEDDED_JSON_HTML


@pytest.fixture
def provider():
    return FakeProvider({
        "https://www.aliexpress.com/item/1.html": PRODUCT_PAGE_HTML,
        "https://www.aliexpress.com/item/2.html": EMBEDDED_JSON_HTML,
        "https://down.example.com/item/3.html": ProviderError("Scraping failed: 503", status_code=503),
    })


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def repo():
    return RunRepository()


@pytest.fixture
def client(repo, provider):
    app.dependency_overrides[get_run_repository] = lambda: repo
    app.dependency_overrides[get_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()
