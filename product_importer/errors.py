class ImporterError(Exception):
    """Base class for errors surfaced to API callers."""


class UrlValidationError(ImporterError):
    """No usable product URLs were submitted."""


class ProviderError(ImporterError):
    """The scraping provider could not return HTML for a URL."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ExportError(ImporterError):
    """There is nothing to export."""


class RunNotFoundError(ImporterError):
    """No scrape run exists for the requested id."""
