import os
from pathlib import Path

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

_ENV_FILE = Path.home() / "env" / ".env.dev"
_env_vars = dotenv_values(str(_ENV_FILE)) if _ENV_FILE.exists() else {}


class Settings(BaseSettings):
    app_name: str = "Product Importer"
    debug: bool = False
    scraping_bee_api_key: str = ""
    scraping_bee_base_url: str = "https://app.scrapingbee.com/api/v1/"
    render_js: bool = True
    premium_proxy: bool = True
    fetch_timeout: float = 60.0
    max_concurrency: int = 1
    request_delay: float = 0.0  # seconds to wait before each fetch
    placeholder_image_url: str = (
        "https://images.unsplash.com/photo-1526170375885-4d8ecf77b99f?w=300&h=300&fit=crop"
    )
    description_max_length: int = 200
    seo_description_max_length: int = 160
    title_suffixes: tuple[str, ...] = (" - AliExpress",)
    export_filename: str = "shopify-products-import.csv"
    export_vendor: str = "AliExpress Import"
    export_tags: str = "imported, aliexpress"

    model_config = {
        "env_prefix": "IMPORTER_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def model_post_init(self, __context):
        if not self.scraping_bee_api_key:
            self.scraping_bee_api_key = (
                _env_vars.get("SCRAPING_BEE_API_KEY")
                or os.environ.get("SCRAPING_BEE_API_KEY", "")
            )


settings = Settings()
