"""
Static HTML crawler.

Fetches server-rendered pages with httpx instead of a browser. It is
faster and lighter than StealthCrawler and exposes the same interface,
so adapters work with either engine.
"""

import asyncio
import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from ..exceptions import FetchError
from .policy import AntiDetectionPolicy

logger = logging.getLogger(__name__)


class StaticCrawler:
    """
    Wrapper for fetching static HTML pages.

    Uses httpx for async HTTP requests and BeautifulSoup for parsing.
    Provides connection pooling, retries and error handling.
    """

    def __init__(
        self,
        policy: Optional[AntiDetectionPolicy] = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the static crawler.

        Args:
            policy: Identity and pacing policy (shared with adapters)
            timeout: Request timeout in seconds
            max_retries: Number of attempts on transport failure
            transport: Custom httpx transport (used by tests)
        """
        self.policy = policy or AntiDetectionPolicy()
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.user_agent: Optional[str] = None
        self._transport = transport
        # Reusable HTTP client with connection pooling
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client; picks the identity once."""
        if self._client is None or self._client.is_closed:
            self.user_agent = self.policy.pick_user_agent()
            headers = self.policy.headers(self.user_agent)
            headers['Accept-Encoding'] = 'gzip, deflate'  # Some sites have issues with brotli
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
                limits=httpx.Limits(
                    max_keepalive_connections=5,
                    max_connections=10,
                    keepalive_expiry=30.0
                )
            )
        return self._client

    async def close(self):
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
        self.user_agent = None

    async def fetch(self, url: str) -> str:
        """
        Fetch a URL and return HTML content.

        Args:
            url: URL to fetch

        Returns:
            HTML content as string

        Raises:
            FetchError: On request failure after retries
        """
        logger.info(f"Fetching: {url}")
        client = await self._get_client()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = await client.get(url)

                if response.status_code >= 400:
                    # Access-denied pages still carry a full document; keep
                    # it so the adapter can flag the item as blocked.
                    if len(response.text) > 200 and '<html' in response.text.lower():
                        logger.warning(f"Got status {response.status_code} but response has content, proceeding")
                        return response.text
                    response.raise_for_status()

                return response.text

            except httpx.HTTPStatusError as e:
                raise FetchError(url, str(e)) from e

            except httpx.HTTPError as e:
                last_error = e
                logger.warning(f"Attempt {attempt + 1}/{self.max_retries} failed for {url}: {e}")
                if attempt < self.max_retries - 1:
                    await asyncio.sleep(2 ** attempt)  # Exponential backoff

        raise FetchError(url, str(last_error) or last_error.__class__.__name__)

    async def fetch_soup(self, url: str) -> BeautifulSoup:
        """
        Fetch a URL and return parsed BeautifulSoup.

        Args:
            url: URL to fetch

        Returns:
            BeautifulSoup object
        """
        html = await self.fetch(url)
        return BeautifulSoup(html, 'html.parser')

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
