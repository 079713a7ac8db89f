"""
Tests for the scraper manager (run orchestration and artifacts).
"""

import asyncio
import json

import pytest

from elt_scrapers.base import BaseScraper, ItemReference, SiteConfig
from elt_scrapers.manager import ScraperManager, as_item_list
from elt_scrapers.sites.breaking_news import BreakingNewsScraper
from elt_scrapers.sites.british_council import BritishCouncilScraper


class StubScraper(BaseScraper):
    """Scraper producing fixed items, or failing during discovery."""

    def __init__(self, crawler, name, count=0, error=None):
        config = SiteConfig(name=name, key=name.lower(), base_url='https://example.com', min_delay_ms=0, max_delay_ms=0)
        super().__init__(config, crawler)
        self.count = count
        self.error = error

    async def discover_items(self, limit):
        if self.error:
            raise self.error
        return [ItemReference(url=f'https://example.com/{self.name}/{i}', level='B1') for i in range(self.count)]

    async def extract_item(self, reference):
        return self.format_result(
            title=f'{self.name} lesson',
            level=reference.level,
            body='A reading text about daily life. ' * 10,
            url=reference.url,
        )


@pytest.fixture
def crawler(make_crawler):
    return make_crawler()


@pytest.fixture
def manager(test_settings, crawler):
    return ScraperManager(test_settings, crawler=crawler)


class TestScrapeAll:
    """Test full runs."""

    def test_mixed_outcomes(self, manager, crawler):
        """Test that one failing source is recorded and the others still run."""
        scrapers = [
            StubScraper(crawler, 'Alpha', count=3),
            StubScraper(crawler, 'Beta', error=RuntimeError('Navigation timeout')),
            StubScraper(crawler, 'Gamma', count=0),
        ]

        result = asyncio.run(manager.scrape_all(scrapers, limit=3))

        assert result.total_items == 3
        assert [s.to_dict() for s in result.sources] == [
            {'name': 'Alpha', 'status': 'success', 'itemsFound': 3},
            {'name': 'Beta', 'status': 'error', 'itemsFound': 0, 'error': 'Navigation timeout'},
            {'name': 'Gamma', 'status': 'no_data', 'itemsFound': 0},
        ]
        assert result.duration.endswith('s')

    def test_artifact_written(self, manager, crawler, test_settings):
        scrapers = [StubScraper(crawler, 'Alpha', count=2)]

        asyncio.run(manager.scrape_all(scrapers))

        data = json.loads(test_settings.content_file.read_text(encoding='utf-8'))
        assert data['metadata']['totalItems'] == 2
        assert data['metadata']['version'] == '1.0.0'
        assert data['metadata']['sources'] == [{'name': 'Alpha', 'status': 'success', 'itemsFound': 2}]
        assert len(data['content']) == 2
        assert data['content'][0]['source'] == 'Alpha'
        assert 'scrapedAt' in data['content'][0]

    def test_items_in_source_order(self, manager, crawler):
        scrapers = [StubScraper(crawler, 'Alpha', count=1), StubScraper(crawler, 'Beta', count=2)]

        result = asyncio.run(manager.scrape_all(scrapers))

        assert [item.source for item in result.content] == ['Alpha', 'Beta', 'Beta']

    def test_limit_applied(self, manager, crawler):
        result = asyncio.run(manager.scrape_all([StubScraper(crawler, 'Alpha', count=10)], limit=4))
        assert result.total_items == 4

    def test_default_limit_from_settings(self, manager, crawler, test_settings):
        result = asyncio.run(manager.scrape_all([StubScraper(crawler, 'Alpha', count=10)]))
        assert result.total_items == test_settings.scraper_items_per_source

    def test_zero_limit_is_not_replaced_by_default(self, manager, crawler):
        """Test that an explicit limit of 0 scrapes nothing instead of falling back to settings."""
        result = asyncio.run(manager.scrape_all([StubScraper(crawler, 'Alpha', count=10)], limit=0))

        assert result.total_items == 0
        assert [source.status for source in result.sources] == ['no_data']

    def test_pause_between_sources(self, manager, crawler, recording_sleep):
        scrapers = [StubScraper(crawler, 'Alpha'), StubScraper(crawler, 'Beta'), StubScraper(crawler, 'Gamma')]

        asyncio.run(manager.scrape_all(scrapers))

        # No items, so only the pauses between sources are recorded
        assert len(recording_sleep.calls) == 2
        assert all(2.0 <= seconds <= 5.0 for seconds in recording_sleep.calls)

    def test_crawler_closed_once(self, manager, crawler):
        scrapers = [StubScraper(crawler, 'Alpha', count=1), StubScraper(crawler, 'Beta', error=RuntimeError('x'))]

        asyncio.run(manager.scrape_all(scrapers))

        assert crawler.close_calls == 1

    def test_empty_scraper_list(self, manager, test_settings):
        result = asyncio.run(manager.scrape_all([]))

        assert result.sources == []
        assert json.loads(test_settings.content_file.read_text())['metadata']['totalItems'] == 0

    def test_save_failure_is_not_raised(self, test_settings, crawler, tmp_path, caplog):
        """Test that an unwritable output location is logged and the run still returns."""
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')
        manager = ScraperManager(test_settings, crawler=crawler, output_dir=blocker / 'out')

        result = asyncio.run(manager.scrape_all([StubScraper(crawler, 'Alpha', count=1)]))

        assert result.total_items == 1
        assert 'Error saving results' in caplog.text

    def test_error_without_message(self, manager, crawler):
        result = asyncio.run(manager.scrape_all([StubScraper(crawler, 'Beta', error=TimeoutError())]))
        assert result.sources[0].error == 'TimeoutError'

    def test_default_scrapers(self, manager):
        scrapers = manager.default_scrapers()
        assert [type(s) for s in scrapers] == [BreakingNewsScraper, BritishCouncilScraper]


class TestScrapeSite:
    """Test single-site runs."""

    def test_single_site_artifact(self, test_settings, make_crawler):
        base = 'https://learnenglish.britishcouncil.org/skills/reading'
        lesson = f'{base}/a1-reading/business-cards'
        pages = {
            f'{base}/a1-reading': f"<html><body><a href='{lesson}'>Business cards</a></body></html>",
            lesson: (
                "<html><body><h1>Business cards</h1><div class='field--name-body'>"
                "<p>Anna works in a bank and she has a new business card.</p>"
                "<p>Her card shows her name, her job and her phone number.</p>"
                "</div></body></html>"
            ),
        }
        crawler = make_crawler(pages)
        manager = ScraperManager(test_settings, crawler=crawler)

        items = asyncio.run(manager.scrape_site('bc', limit=1))

        assert len(items) == 1
        path = test_settings.data_dir / 'content-britishcouncil.json'
        data = json.loads(path.read_text(encoding='utf-8'))
        assert isinstance(data, list)
        assert data[0]['title'] == 'Business cards'
        assert data[0]['level'] == 'A1'
        assert not test_settings.content_file.exists()
        assert crawler.close_calls == 1

    def test_unknown_site(self, manager):
        with pytest.raises(ValueError):
            asyncio.run(manager.scrape_site('nope'))

    def test_aliases_resolve(self, manager):
        assert isinstance(manager.get_scraper('breakingnews'), BreakingNewsScraper)
        assert isinstance(manager.get_scraper('british'), BritishCouncilScraper)


class TestHelpers:
    """Test manager helpers."""

    def test_as_item_list(self, crawler):
        item = StubScraper(crawler, 'Alpha').format_result('T', 'B1', 'body')
        assert as_item_list(None) == []
        assert as_item_list(item) == [item]
        assert as_item_list((item, item)) == [item, item]

    def test_list_scrapers(self, manager):
        listing = manager.list_scrapers()
        assert [s['key'] for s in listing] == ['breaking', 'britishcouncil']
        assert all(s['implemented'] for s in listing)

    def test_output_dir_override(self, test_settings, tmp_path):
        manager = ScraperManager(test_settings, output_dir=tmp_path / 'elsewhere')
        assert manager.content_file == tmp_path / 'elsewhere' / 'content.json'
        assert manager.site_content_file('breaking') == tmp_path / 'elsewhere' / 'content-breaking.json'
