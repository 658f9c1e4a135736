import csv
import io
import json
import re

from product_importer.config import settings
from product_importer.errors import ExportError
from product_importer.schemas.product import Product

SHOPIFY_COLUMNS = [
    "Handle", "Title", "Body (HTML)", "Vendor", "Product Category", "Type",
    "Tags", "Published", "Option1 Name", "Option1 Value", "Option1 Linked To",
    "Option2 Name", "Option2 Value", "Option3 Name", "Option3 Value",
    "Variant SKU", "Variant Grams", "Variant Inventory Tracker",
    "Variant Inventory Qty", "Variant Inventory Policy",
    "Variant Fulfillment Service", "Variant Price", "Variant Compare At Price",
    "Variant Requires Shipping", "Variant Taxable", "Variant Barcode",
    "Image Src", "Image Position", "Image Alt Text", "Gift Card", "SEO Title",
    "SEO Description", "Google Shopping",
    "Google Shopping - Google Product Category", "Google Shopping - Gender",
    "Google Shopping - Age Group", "Google Shopping - MPN",
    "Google Shopping - AdWords Grouping", "Google Shopping - AdWords Labels",
    "Google Shopping - Condition", "Google Shopping - Custom Product",
    "Google Shopping - Custom Label 0", "Google Shopping - Custom Label 1",
    "Google Shopping - Custom Label 2", "Google Shopping - Custom Label 3",
    "Google Shopping - Custom Label 4", "Variant Image", "Variant Weight Unit",
    "Variant Tax Code", "Cost per item", "Status",
]

_HANDLE_RE = re.compile(r"[^a-z0-9]+")


def make_handle(title: str, fallback: str = "") -> str:
    """URL handle: lower-cased title with non-alphanumeric runs collapsed to '-'."""
    return _HANDLE_RE.sub("-", title.lower()).strip("-") or fallback


def strip_currency(price: str | None) -> str:
    return (price or "").replace("$", "").strip()


class ExportService:
    def export_csv(self, products: list[Product]) -> bytes:
        """Generate a Shopify product-import CSV, UTF-8 encoded."""
        if not products:
            raise ExportError("No products to export. Please scrape some products first")

        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(SHOPIFY_COLUMNS)
        for product in products:
            writer.writerow(self._row(product))
        return output.getvalue().encode("utf-8")

    def export_json(self, products: list[Product]) -> str:
        """Generate JSON string of the scraped products."""
        if not products:
            raise ExportError("No products to export. Please scrape some products first")
        data = [product.model_dump(mode="json", by_alias=True) for product in products]
        return json.dumps(data, indent=2)

    def _row(self, product: Product) -> list[str]:
        row = dict.fromkeys(SHOPIFY_COLUMNS, "")
        row.update({
            "Handle": make_handle(product.title, fallback=product.id),
            "Title": product.title,
            "Body (HTML)": product.description,
            "Vendor": settings.export_vendor,
            "Tags": settings.export_tags,
            "Published": "TRUE",
            "Option1 Name": "Color",
            "Option1 Value": product.variants[0] if product.variants else "Default",
            "Variant SKU": product.id,
            "Variant Grams": "0",
            "Variant Inventory Qty": "100",
            "Variant Inventory Policy": "deny",
            "Variant Fulfillment Service": "manual",
            "Variant Price": strip_currency(product.price),
            "Variant Compare At Price": strip_currency(product.original_price),
            "Variant Requires Shipping": "TRUE",
            "Variant Taxable": "TRUE",
            "Image Src": product.image_url,
            "Image Position": "1",
            "Image Alt Text": product.title,
            "Gift Card": "FALSE",
            "SEO Title": product.title,
            "SEO Description": product.description[: settings.seo_description_max_length],
            "Google Shopping - Condition": "new",
            "Variant Weight Unit": "lb",
            "Status": "active",
        })
        return list(row.values())
