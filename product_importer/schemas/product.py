from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

DEFAULT_TITLE = "Product Title Not Found"
DEFAULT_PRICE = "$0.00"
DEFAULT_RATING = "0.0"
DEFAULT_REVIEWS = "0"
DEFAULT_VARIANTS = ("Default",)


class Product(BaseModel):
    """One scraped product. Immutable once built; JSON uses camelCase keys."""

    id: str
    title: str = DEFAULT_TITLE
    price: str = DEFAULT_PRICE
    original_price: str | None = None
    image_url: str
    description: str
    url: str
    rating: str = DEFAULT_RATING
    reviews: str = DEFAULT_REVIEWS
    variants: tuple[str, ...] = Field(default=DEFAULT_VARIANTS, min_length=1)

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class ProductScrapeRequest(BaseModel):
    url: str | None = None
