from product_importer.repositories.run_repo import RunRepository, run_repository
from product_importer.services.scraping_bee import FetchProvider, ScrapingBeeClient


def get_run_repository() -> RunRepository:
    return run_repository


def get_provider() -> FetchProvider:
    return ScrapingBeeClient()
