"""
Breaking News English scraper.

Graded news lessons published in seven difficulty versions (Level 0-6).

Site structure:
- Home page: `.lesson-excerpt article` blocks with a `header h3 a` title link,
  `.lesson-levels a` links to each level version, `.content` summary
- Lesson pages: article paragraphs, bold key words, vocabulary tables
"""

from typing import List, Tuple

from bs4 import BeautifulSoup, Tag

from ..base import BaseScraper, ItemReference, LevelLink, ScrapedItem, VocabularyExercise
from ..config import get_site_config
from ..utils.extractors import (
    absolute_url,
    collect_paragraphs,
    extract_emphasis_vocabulary,
    extract_table_vocabulary,
    first_text,
    is_blocked_title,
    is_link_text_usable,
    largest_text_block,
    level_from_url,
    page_title,
)
from ..utils.normalizers import clean_text


# (article container, title link) pairs tried in order
LISTING_STRATEGIES: Tuple[Tuple[str, str], ...] = (
    ('.lesson-excerpt article', 'header h3 a'),
    ('.lesson-excerpt', 'h3 a'),
    ('article', 'h2 a, h3 a'),
)

TITLE_SELECTORS = ('h1',)

BODY_SELECTORS = ('article p', '#primary p', 'p')

# Lesson paragraphs are long; short ones are captions and menus
MIN_PARAGRAPH_LENGTH = 80
MIN_BODY_LENGTH = 200

LEVEL_URL_PATTERN = r'-(\d)\.html$'


class BreakingNewsScraper(BaseScraper):
    """
    Scraper for breakingnewsenglish.com.

    Levels are kept raw ("Level 3"); normalize_level() maps them to CEFR.
    """

    def __init__(self, crawler):
        super().__init__(get_site_config('breaking'), crawler)

    async def discover_items(self, limit: int) -> List[ItemReference]:
        """Read the latest lessons from the home page."""
        listing_url = self.config.listing_urls['latest']
        soup = await self.crawler.fetch_soup(listing_url)
        references = self.parse_listing(soup, limit)
        self.logger.info(f"Found {len(references)} articles to scrape")
        return self.resolve_references(references, limit)

    def parse_listing(self, soup: BeautifulSoup, limit: int) -> List[ItemReference]:
        """Parse lesson references using the first strategy that yields any."""
        for container_selector, link_selector in LISTING_STRATEGIES:
            references = []
            seen = set()
            for container in soup.select(container_selector):
                if len(references) >= limit:
                    break
                reference = self._parse_excerpt(container, link_selector)
                if reference is None or reference.url in seen:
                    continue
                seen.add(reference.url)
                references.append(reference)
            if references:
                return references
        return []

    def _parse_excerpt(self, container: Tag, link_selector: str):
        link = container.select_one(link_selector)
        if link is None:
            return None
        href = (link.get('href') or '').strip()
        title = clean_text(link.get_text(' ', strip=True))
        if not href or not is_link_text_usable(title):
            return None

        levels = []
        for level_link in container.select('.lesson-levels a'):
            level_href = (level_link.get('href') or '').strip()
            level_text = clean_text(level_link.get_text(' ', strip=True))
            if level_href and level_text:
                levels.append(LevelLink(level=level_text, url=absolute_url(level_href, self.config.base_url)))

        description = first_text(container, ('.content',)) or None
        difficulty = first_text(container, ('.smallfont',)) or None

        return ItemReference(
            url=absolute_url(href, self.config.base_url),
            title=title,
            description=description,
            difficulty=difficulty,
            available_levels=tuple(levels),
        )

    async def extract_item(self, reference: ItemReference) -> ScrapedItem:
        """Scrape the first level version of a lesson (or the lesson itself)."""
        url = reference.available_levels[0].url if reference.available_levels else reference.url
        soup = await self.crawler.fetch_soup(url)

        title = (
            first_text(soup, TITLE_SELECTORS)
            or page_title(soup, ' - ')
            or reference.title
            or 'Untitled Article'
        )
        if is_blocked_title(title):
            return self.blocked_result(reference)

        return self.format_result(
            title=title,
            level=self._detect_level(url, reference),
            body=self.parse_body(soup),
            exercises=self.parse_vocabulary(soup),
            url=reference.url,
            available_levels=reference.available_levels,
            description=reference.description,
        )

    def _detect_level(self, url: str, reference: ItemReference) -> str:
        level_num = level_from_url(url, LEVEL_URL_PATTERN)
        if level_num is not None:
            return f"Level {level_num}"
        if reference.available_levels:
            return reference.available_levels[0].level
        return reference.level or 'Unknown'

    def parse_body(self, soup: BeautifulSoup) -> str:
        """Lesson paragraphs, or the largest plausible text block as a fallback."""
        body = collect_paragraphs(soup, BODY_SELECTORS, min_length=MIN_PARAGRAPH_LENGTH)
        if len(body) < MIN_BODY_LENGTH:
            block = largest_text_block(soup, 'div', min_length=300, max_length=3000)
            if len(block) > len(body):
                body = block
        return body

    def parse_vocabulary(self, soup: BeautifulSoup) -> List[VocabularyExercise]:
        """Bold key words followed by vocabulary-table pairs, deduplicated."""
        exercises = []
        seen = set()
        for word, definition in extract_emphasis_vocabulary(soup) + extract_table_vocabulary(soup):
            if word.lower() in seen:
                continue
            seen.add(word.lower())
            exercises.append(VocabularyExercise(word=word, definition=definition))
        return exercises[:self.config.max_exercises]
