"""
Stealth crawler for sites with bot detection.

Uses Playwright with a realistic browser fingerprint and a rotating
user agent. One browser and one context are created lazily and shared by
every fetch of a run; each fetch opens and closes its own page.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from bs4 import BeautifulSoup
from playwright.async_api import Browser, BrowserContext, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from ..exceptions import FetchError
from .policy import AntiDetectionPolicy

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    '--disable-blink-features=AutomationControlled',
    '--disable-dev-shm-usage',
    '--no-sandbox',
]

# Hide automation indicators from page scripts
STEALTH_INIT_SCRIPT = """
    Object.defineProperty(navigator, 'webdriver', {
        get: () => undefined
    });

    Object.defineProperty(navigator, 'languages', {
        get: () => ['en-US', 'en']
    });
"""


class StealthCrawler:
    """
    Headless Chromium fetch engine.

    Features:
    - Lazily started browser session, reused across fetches
    - One random user agent per browsing context
    - Bounded navigation timeout plus a settle wait for deferred content
    - Page closed on every exit path
    """

    def __init__(
        self,
        policy: Optional[AntiDetectionPolicy] = None,
        timeout: float = 30.0,
        settle_time: float = 1.5,
        headless: bool = True,
        playwright_factory: Callable[[], Any] = async_playwright
    ):
        """
        Initialize the stealth crawler.

        Args:
            policy: Identity and pacing policy (shared with adapters)
            timeout: Navigation timeout in seconds
            settle_time: Extra wait after DOM ready, in seconds
            headless: Run browser in headless mode
            playwright_factory: Callable returning a Playwright context manager
        """
        self.policy = policy or AntiDetectionPolicy()
        self.timeout = timeout
        self.settle_time = settle_time
        self.headless = headless
        self.user_agent: Optional[str] = None
        self._playwright_factory = playwright_factory
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @property
    def is_open(self) -> bool:
        """True while a browsing context exists."""
        return self._context is not None

    async def _init_browser(self):
        """Initialize browser and context if not already done."""
        if self._context is not None:
            return

        try:
            self._playwright = await self._playwright_factory().start()
            logger.debug("Launching Chromium browser...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS,
            )

            self.user_agent = self.policy.pick_user_agent()
            self._context = await self._browser.new_context(
                viewport={'width': 1920, 'height': 1080},
                user_agent=self.user_agent,
                locale='en-US',
                timezone_id='America/New_York',
                extra_http_headers=self.policy.headers(),
            )
            await self._context.add_init_script(STEALTH_INIT_SCRIPT)
            logger.info(f"Browser initialized with UA: {self.user_agent[:50]}...")

        except Exception as e:
            logger.error(f"Failed to initialize browser: {e}")
            # Clean up partial initialization
            await self._cleanup()
            raise

    async def _cleanup(self):
        """Clean up browser resources, tolerating half-closed sessions."""
        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning(f"Error closing context: {e}")
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

        self.user_agent = None

    async def fetch(self, url: str) -> str:
        """
        Fetch a URL with the shared browser context.

        Args:
            url: URL to fetch

        Returns:
            Rendered HTML content

        Raises:
            FetchError: On navigation timeout or network failure
        """
        await self._init_browser()

        logger.info(f"Fetching: {url}")
        page: Optional[Page] = None
        try:
            page = await self._context.new_page()
            response = await page.goto(
                url,
                wait_until='domcontentloaded',
                timeout=int(self.timeout * 1000)
            )
            if response is not None and response.status >= 400:
                # Block pages often arrive as 403; keep the HTML so the
                # adapter can recognise them.
                logger.debug(f"HTTP {response.status} for {url}")

            await page.wait_for_timeout(int(self.settle_time * 1000))
            return await page.content()

        except (PlaywrightError, asyncio.TimeoutError) as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e

        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as e:
                    logger.debug(f"Error closing page: {e}")

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

    async def close(self):
        """Close the browser and cleanup resources. No-op without a session."""
        if self._context is None and self._browser is None and self._playwright is None:
            return
        await self._cleanup()
        logger.info("Browser closed.")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
