"""
Exception types raised by the scraper system.
"""


class ScraperError(Exception):
    """Base class for scraper errors."""


class FetchError(ScraperError):
    """A page could not be fetched (timeout, DNS failure, connection reset)."""

    def __init__(self, url: str, message: str):
        self.url = url
        self.message = message
        super().__init__(f"Failed to fetch {url}: {message}")


class StorageError(ScraperError):
    """The run artifact could not be read or written."""
