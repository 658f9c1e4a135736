import csv
import io

from product_importer.errors import ProviderError

URLS = [
    "https://down.example.com/item/3.html",
    "https://www.aliexpress.com/item/1.html",
]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_scrape_requires_urls(client, provider):
    resp = client.post("/scrape", json={"urls": ["", "   "]})

    assert resp.status_code == 400
    assert "at least one product URL" in resp.json()["error"]
    assert provider.calls == []


def test_scrape_run_completes_in_background(client):
    resp = client.post("/scrape", json={"urls": ["", *URLS]})
    assert resp.status_code == 200
    started = resp.json()
    assert started["total"] == 2

    resp = client.get(f"/scrape/{started['id']}")
    run = resp.json()
    assert run["status"] == "completed"
    assert run["progress"] == 1.0
    assert [p["url"] for p in run["products"]] == URLS
    assert run["products"][0]["title"] == "Product from down.example.com"
    assert run["products"][1]["imageUrl"] == "https://ae01.alicdn.com/kf/mouse.jpg"
    assert [n["kind"] for n in run["notices"]] == ["warning", "success"]


def test_latest_run_alias(client):
    client.post("/scrape", json={"urls": URLS[1:]})
    assert client.get("/scrape/latest").json()["completed"] == 1


def test_unknown_run(client):
    assert client.get("/scrape/nope").status_code == 404
    assert client.post("/scrape/nope/cancel").status_code == 404
    assert client.get("/scrape/nope/stream").status_code == 404


def test_cancel_finished_run_keeps_status(client):
    run_id = client.post("/scrape", json={"urls": URLS}).json()["id"]
    resp = client.post(f"/scrape/{run_id}/cancel")
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"


def test_export_csv(client):
    client.post("/scrape", json={"urls": URLS})

    resp = client.get("/export/csv")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "shopify-products-import.csv" in resp.headers["content-disposition"]
    assert resp.headers["x-product-count"] == "2"
    rows = list(csv.reader(io.StringIO(resp.content.decode("utf-8"))))
    assert len(rows) == 3
    assert len(rows[0]) == 51
    assert rows[2][0] == "ergonomic-wireless-mouse"


def test_export_without_products(client):
    resp = client.get("/export/csv")
    assert resp.status_code == 400
    assert "No products to export" in resp.json()["error"]

    assert client.get("/export/json").status_code == 400


def test_export_unknown_run(client):
    assert client.get("/export/csv", params={"run_id": "nope"}).status_code == 404


def test_export_json(client):
    run_id = client.post("/scrape", json={"urls": URLS}).json()["id"]

    resp = client.get("/export/json", params={"run_id": run_id})

    assert resp.status_code == 200
    assert [p["url"] for p in resp.json()] == URLS


def test_scrape_single_product(client):
    resp = client.post("/products/scrape", json={"url": URLS[1]})

    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Ergonomic Wireless Mouse"
    assert data["price"] == "$12.50"
    assert data["originalPrice"] == "$20.00"


def test_scrape_single_requires_url(client):
    resp = client.post("/products/scrape", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Product URL is required"}


def test_scrape_single_passes_provider_status(client):
    resp = client.post("/products/scrape", json={"url": URLS[0]})
    assert resp.status_code == 503
    assert resp.json() == {"error": "Scraping failed: 503"}


def test_scrape_single_missing_key(client, provider):
    provider.pages["https://nokey.example.com"] = ProviderError("ScrapingBee API key not configured")

    resp = client.post("/products/scrape", json={"url": "https://nokey.example.com"})

    assert resp.status_code == 500
    assert "not configured" in resp.json()["error"]
