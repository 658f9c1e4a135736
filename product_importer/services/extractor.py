"""Best-effort product field extraction from scraped HTML.

Each field is resolved by a cascade of independent patterns, ordered from the
most structured source (meta tags) to embedded JSON to free text. A pattern
that misses simply hands over to the next one and, ultimately, to the field's
default, so extraction never fails on malformed markup.
"""

import logging
import re
import uuid
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from product_importer.config import settings
from product_importer.schemas.product import (
    DEFAULT_PRICE,
    DEFAULT_RATING,
    DEFAULT_REVIEWS,
    DEFAULT_TITLE,
    DEFAULT_VARIANTS,
    Product,
)

logger = logging.getLogger(__name__)

CDN_MARKER = "alicdn"
MAX_RATING = 5.0

_AMOUNT_RE = re.compile(r"[0-9][0-9,]*(?:\.[0-9]+)?")

_PRICE_PATTERNS = (
    re.compile(r"US \$\s?([0-9][0-9,]*\.?[0-9]*)", re.IGNORECASE),
    re.compile(r"\$([0-9][0-9,]*\.?[0-9]*)"),
    re.compile(r'"price"\s*:\s*"([^"]+)"', re.IGNORECASE),
    re.compile(r"price[^>]*>\s*\$?([0-9][0-9,]*\.?[0-9]*)", re.IGNORECASE),
)

_ORIGINAL_PRICE_PATTERNS = (
    re.compile(r'"originalPrice"\s*:\s*"([^"]+)"', re.IGNORECASE),
    re.compile(r'"originalPrice"\s*:\s*([0-9][0-9.]*)', re.IGNORECASE),
    re.compile(
        r'class="[^"]*price-{1,2}original[^"]*"[^>]*>\s*(?:US\s*)?\$?\s*([0-9][0-9,]*\.?[0-9]*)',
        re.IGNORECASE,
    ),
)

_IMAGE_PATTERNS = (
    re.compile(r'"mainImage"\s*:\s*"([^"]+)"', re.IGNORECASE),
)

_RATING_PATTERNS = (
    re.compile(r"rating[^>]*>\s*([0-9]\.[0-9])", re.IGNORECASE),
    re.compile(r'"rating"\s*:\s*"?([0-9]\.[0-9])', re.IGNORECASE),
)

_REVIEW_PATTERNS = (
    re.compile(r"(?<![0-9,])([0-9][0-9,]*)\s*reviews?\b", re.IGNORECASE),
    re.compile(r'"reviewCount"\s*:\s*"?([0-9][0-9,]*)', re.IGNORECASE),
)


def new_product_id() -> str:
    return uuid.uuid4().hex


def parse_html(html: str | bytes) -> BeautifulSoup:
    """Parse scraped markup; markup the parser rejects yields an empty document."""
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup:
        logger.warning("HTML parser rejected markup (%d chars)", len(html))
        return BeautifulSoup("", "html.parser")


def extract_product(html: str, source_url: str, product_id: str | None = None) -> Product:
    """Build a fully populated Product from raw HTML. Never raises."""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    html = html or ""
    soup = parse_html(html)

    price = extract_price(html)
    product = Product(
        id=product_id or new_product_id(),
        title=extract_title(html, soup),
        price=price,
        original_price=extract_original_price(html, price),
        image_url=extract_image_url(html, source_url, soup),
        description=extract_description(html, source_url, soup),
        url=source_url,
        rating=extract_rating(html),
        reviews=extract_reviews(html),
        variants=DEFAULT_VARIANTS,
    )
    logger.debug("Extracted %r (%s) from %s", product.title, product.price, source_url)
    return product


def fallback_product(url: str, product_id: str | None = None) -> Product:
    """Product built from the URL alone, used when the page could not be fetched."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        host = None

    return Product(
        id=product_id or new_product_id(),
        title=f"Product from {host or url}",
        image_url=settings.placeholder_image_url,
        description=f"Product URL: {url}",
        url=url,
    )


def extract_title(html: str, soup: BeautifulSoup | None = None) -> str:
    soup = soup or parse_html(html)

    title = ""
    title_tag = soup.find("title")
    if title_tag:
        title = title_tag.get_text()
        for suffix in settings.title_suffixes:
            title = title.replace(suffix, "")

    og_title = _meta_content(soup, "og:title")
    if og_title:
        title = og_title

    return title.strip() or DEFAULT_TITLE


def extract_price(html: str) -> str:
    for pattern in _PRICE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        amount = _clean_amount(match.group(1))
        if amount:
            return f"${amount}"
    return DEFAULT_PRICE


def extract_original_price(html: str, price: str) -> str | None:
    """Pre-discount price, kept only when it is above the extracted price."""
    if price == DEFAULT_PRICE:
        return None

    current = float(price.lstrip("$"))
    for pattern in _ORIGINAL_PRICE_PATTERNS:
        match = pattern.search(html)
        if not match:
            continue
        amount = _clean_amount(match.group(1))
        if amount and float(amount) > current:
            return f"${amount}"
    return None


def extract_image_url(html: str, source_url: str, soup: BeautifulSoup | None = None) -> str:
    soup = soup or parse_html(html)

    candidates = [_meta_content(soup, "og:image")]
    for pattern in _IMAGE_PATTERNS:
        match = pattern.search(html)
        candidates.append(match.group(1) if match else None)
    candidates.append(next(
        (img["src"] for img in soup.find_all("img", src=True) if CDN_MARKER in img["src"]),
        None,
    ))

    for raw in candidates:
        if not raw:
            continue
        url = normalize_image_url(raw, source_url)
        if url:
            return url
    return settings.placeholder_image_url


def normalize_image_url(raw: str, base_url: str = "") -> str | None:
    """Turn a scraped image reference into an absolute https URL."""
    url = raw.replace("\\/", "/").strip()
    if not url or url.startswith("data:"):
        return None
    if url.startswith("//"):
        return "https:" + url
    if url.startswith("https://"):
        return url
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]

    try:
        joined = urljoin(base_url, url)
    except ValueError:
        return None
    if joined.startswith("http://"):
        joined = "https://" + joined[len("http://"):]
    return joined if joined.startswith("https://") else None


def extract_description(html: str, source_url: str, soup: BeautifulSoup | None = None) -> str:
    soup = soup or parse_html(html)

    content = _meta_content(soup, "description")
    if content:
        return content[: settings.description_max_length]
    return f"Scraped from: {source_url}"


def extract_rating(html: str) -> str:
    for pattern in _RATING_PATTERNS:
        for match in pattern.finditer(html):
            if float(match.group(1)) <= MAX_RATING:
                return match.group(1)
    return DEFAULT_RATING


def extract_reviews(html: str) -> str:
    for pattern in _REVIEW_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(1).replace(",", "")
    return DEFAULT_REVIEWS


def _meta_content(soup: BeautifulSoup, key: str) -> str | None:
    """Content of the first <meta> whose property or name equals ``key``."""
    for tag in soup.find_all("meta", content=True):
        names = (tag.get("property") or "", tag.get("name") or "")
        if key not in (name.lower() for name in names):
            continue
        content = tag["content"].strip()
        if content:
            return content
    return None


def _clean_amount(raw: str) -> str | None:
    match = _AMOUNT_RE.search(raw)
    if not match:
        return None
    return match.group(0).replace(",", "")
