"""
Pytest configuration and fixtures for scraper tests.
"""

import random

import pytest
from bs4 import BeautifulSoup

from elt_scrapers.crawlers.policy import AntiDetectionPolicy
from elt_scrapers.exceptions import FetchError
from elt_scrapers.settings import Settings


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns at once and records pauses."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeCrawler:
    """
    Crawler serving canned HTML by URL.

    Values in `pages` are HTML strings or exceptions to raise; unknown
    URLs raise FetchError.
    """

    def __init__(self, pages=None, policy=None):
        self.pages = dict(pages or {})
        self.policy = policy or AntiDetectionPolicy(0, 0, sleep=RecordingSleep(), rng=random.Random(7))
        self.fetched = []
        self.close_calls = 0

    async def fetch(self, url):
        self.fetched.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, 'net::ERR_NAME_NOT_RESOLVED')
        if isinstance(page, Exception):
            raise page
        return page

    async def fetch_soup(self, url):
        return BeautifulSoup(await self.fetch(url), 'html.parser')

    async def close(self):
        self.close_calls += 1


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def policy(recording_sleep):
    """Policy with instant, recorded pauses and a seeded random source."""
    return AntiDetectionPolicy(2000, 5000, sleep=recording_sleep, rng=random.Random(42))


@pytest.fixture
def make_crawler(policy):
    """Factory for FakeCrawler instances sharing the test policy."""
    def _make(pages=None):
        return FakeCrawler(pages, policy=policy)
    return _make


@pytest.fixture
def test_settings(tmp_path):
    """Settings writing artifacts under a temporary directory."""
    return Settings(
        data_dir=tmp_path / "data",
        scraper_min_delay_ms=0,
        scraper_max_delay_ms=0,
    )


def page(title='', body='', head_title=''):
    """Minimal HTML document."""
    head = f"<title>{head_title}</title>" if head_title else ''
    heading = f"<h1>{title}</h1>" if title else ''
    return f"<html><head>{head}</head><body>{heading}{body}</body></html>"


@pytest.fixture
def html_page():
    return page
