"""
Scraper system for ELT (English Language Teaching) content.

This package collects authentic reading and vocabulary material from
public ELT websites for lesson-plan generation:
- Headless-browser fetching with anti-detection measures (Playwright)
- Defensive, selector-chain based HTML parsing (BeautifulSoup)
- One JSON artifact per run for the content loader
"""

from .base import (
    BaseScraper,
    SiteConfig,
    ItemReference,
    ScrapedItem,
    RunResult,
    SourceStatus,
    VocabularyExercise,
    ComprehensionExercise,
    TaskExercise,
)
from .config import SITES, get_site_config, get_enabled_sites
from .exceptions import ScraperError, FetchError, StorageError
from .manager import ScraperManager

__all__ = [
    'BaseScraper',
    'SiteConfig',
    'ItemReference',
    'ScrapedItem',
    'RunResult',
    'SourceStatus',
    'VocabularyExercise',
    'ComprehensionExercise',
    'TaskExercise',
    'SITES',
    'get_site_config',
    'get_enabled_sites',
    'ScraperError',
    'FetchError',
    'StorageError',
    'ScraperManager',
]
