"""
Scraper Manager - orchestrates all site scrapers.

Provides a unified interface for running scrapers, either individually
or all at once. Scrapers run strictly one after another; a failing
scraper is recorded and the run moves on to the next one.
"""

import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Type
import logging

from .base import (
    BaseScraper,
    Colors,
    RunResult,
    ScrapedItem,
    SourceStatus,
    STATUS_ERROR,
    STATUS_NO_DATA,
    STATUS_SUCCESS,
)
from .config import get_enabled_sites, get_site_summary, resolve_site_key
from .crawlers import build_crawler
from .settings import settings as default_settings
from .storage import save_items, save_run_result

# Import all implemented scrapers
from .sites.breaking_news import BreakingNewsScraper
from .sites.british_council import BritishCouncilScraper

logger = logging.getLogger(__name__)


# Registry of implemented scrapers
# Add new scrapers here as they are implemented
SCRAPER_REGISTRY: Dict[str, Type[BaseScraper]] = {
    'breaking': BreakingNewsScraper,
    'britishcouncil': BritishCouncilScraper,
}


def as_item_list(data) -> List[ScrapedItem]:
    """Flatten a scraper's return value: list as is, single item wrapped, None empty."""
    if data is None:
        return []
    if isinstance(data, ScrapedItem):
        return [data]
    return list(data)


class ScraperManager:
    """
    Manages and orchestrates all site scrapers.

    Usage:
        manager = ScraperManager()

        # Run all enabled scrapers, write content.json
        result = await manager.scrape_all()

        # Run single scraper, write content-<key>.json
        items = await manager.scrape_site('bc')
    """

    def __init__(self, settings=None, crawler=None, output_dir: Optional[Path] = None):
        """
        Initialize the scraper manager.

        Args:
            settings: Settings instance (module default when omitted)
            crawler: Fetch engine shared by all scrapers (built lazily when omitted)
            output_dir: Overrides settings.data_dir for artifacts
        """
        self.settings = settings or default_settings
        self.crawler = crawler
        self.output_dir = Path(output_dir) if output_dir else self.settings.data_dir
        self.results: Optional[RunResult] = None

    @property
    def content_file(self) -> Path:
        return self.output_dir / self.settings.content_filename

    def site_content_file(self, site_key: str) -> Path:
        return self.output_dir / self.settings.site_content_file(site_key).name

    def _get_crawler(self):
        if self.crawler is None:
            self.crawler = build_crawler(self.settings)
        return self.crawler

    def get_scraper(self, site_key: str) -> BaseScraper:
        """
        Get a scraper instance for a site.

        Args:
            site_key: Site identifier or alias (e.g., 'bc')

        Raises:
            ValueError: If the site is unknown or has no scraper
        """
        key = resolve_site_key(site_key)
        if key not in SCRAPER_REGISTRY:
            raise ValueError(f"Scraper not implemented for site: {key}")
        return SCRAPER_REGISTRY[key](self._get_crawler())

    def default_scrapers(self) -> List[BaseScraper]:
        """Scrapers for every enabled, implemented site, in configuration order."""
        return [self.get_scraper(key) for key in get_enabled_sites() if key in SCRAPER_REGISTRY]

    async def _run_scraper(self, scraper: BaseScraper, limit: int, result: RunResult):
        """Run one scraper and record its outcome on result."""
        logger.info(f"\n🔍 Starting {scraper.name} scraper...")
        started = time.monotonic()

        try:
            items = as_item_list(await scraper.run(limit))
        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"❌ {scraper.name} failed after {time.monotonic() - started:.1f}s: {message}")
            result.sources.append(SourceStatus(name=scraper.name, status=STATUS_ERROR, items_found=0, error=message))
            return

        elapsed = time.monotonic() - started
        if items:
            result.content.extend(items)
            result.sources.append(SourceStatus(name=scraper.name, status=STATUS_SUCCESS, items_found=len(items)))
            logger.info(f"✅ {scraper.name}: Successfully scraped {len(items)} item(s) in {elapsed:.1f}s")
        else:
            result.sources.append(SourceStatus(name=scraper.name, status=STATUS_NO_DATA, items_found=0))
            logger.warning(f"⚠️  {scraper.name}: No data returned ({elapsed:.1f}s)")

    async def _close_crawlers(self, scrapers: Sequence[BaseScraper]):
        """Close every distinct fetch engine used during the run, once."""
        crawlers = []
        for crawler in [self.crawler] + [s.crawler for s in scrapers]:
            if crawler is not None and all(crawler is not c for c in crawlers):
                crawlers.append(crawler)
        for crawler in crawlers:
            try:
                await crawler.close()
            except Exception as e:
                logger.warning(f"Error closing crawler: {e}")

    async def scrape_all(
        self,
        scrapers: Optional[Sequence[BaseScraper]] = None,
        limit: Optional[int] = None
    ) -> RunResult:
        """
        Run scrapers sequentially and write the run artifact.

        Args:
            scrapers: Scrapers to run (defaults to all enabled sites)
            limit: Items per scraper (defaults to settings)

        Returns:
            RunResult with one sources entry per scraper
        """
        if limit is None:
            limit = self.settings.scraper_items_per_source
        result = RunResult()
        started = time.monotonic()
        run_scrapers: List[BaseScraper] = list(scrapers) if scrapers is not None else []

        try:
            if scrapers is None:
                run_scrapers = self.default_scrapers()
            logger.info(f"Starting scrape for {len(run_scrapers)} sources: {[s.name for s in run_scrapers]}")

            for idx, scraper in enumerate(run_scrapers):
                if idx > 0:
                    # Pause between sources
                    await scraper.policy.sleep()
                await self._run_scraper(scraper, limit, result)
        finally:
            await self._close_crawlers(run_scrapers)

        result.duration = f"{time.monotonic() - started:.2f}s"
        self.results = result

        save_run_result(result, self.content_file)
        self.log_summary(result)
        return result

    async def scrape_site(self, site_key: str, limit: Optional[int] = None) -> List[ScrapedItem]:
        """
        Run scraper for a single site and write its own artifact.

        Args:
            site_key: Site identifier or alias

        Returns:
            Scraped items

        Raises:
            ValueError: If the site is unknown
        """
        if limit is None:
            limit = self.settings.scraper_items_per_source
        key = resolve_site_key(site_key)
        scraper = self.get_scraper(key)

        try:
            items = as_item_list(await scraper.run(limit))
        finally:
            await self._close_crawlers([scraper])

        save_items(items, self.site_content_file(key))
        return items

    def list_scrapers(self) -> List[Dict]:
        """
        List all configured sites and their implementation status.
        """
        scrapers = get_site_summary()
        for site in scrapers:
            site['implemented'] = site['key'] in SCRAPER_REGISTRY
        return scrapers

    def log_summary(self, result: RunResult):
        """Log the final per-source summary table."""
        width = 60
        logger.info('╔' + '═' * width + '╗')
        logger.info('║' + 'SCRAPING SUMMARY'.center(width) + '║')
        logger.info('╠' + '═' * width + '╣')
        logger.info('║' + f"  Total items scraped: {result.total_items}".ljust(width) + '║')
        logger.info('║' + f"  Duration: {result.duration}".ljust(width) + '║')
        logger.info('║' + f"  Sources processed: {len(result.sources)}".ljust(width) + '║')
        logger.info('╠' + '═' * width + '╣')
        for source in result.sources:
            marker = {
                STATUS_SUCCESS: Colors.green('OK '),
                STATUS_ERROR: Colors.red('ERR'),
            }.get(source.status, Colors.yellow('---'))
            line = f"  {source.name}: {source.items_found} items ({source.status})"
            logger.info('║' + f"{marker}{line}".ljust(width + len(marker) - 3) + '║')
        logger.info('╚' + '═' * width + '╝')


# Convenience functions for standalone usage

async def scrape_all(settings=None) -> RunResult:
    """Scrape all enabled sites and write the run artifact."""
    manager = ScraperManager(settings)
    return await manager.scrape_all()


async def scrape_site(site_key: str, settings=None) -> List[ScrapedItem]:
    """Scrape a single site and write its artifact."""
    manager = ScraperManager(settings)
    return await manager.scrape_site(site_key)
