"""
British Council LearnEnglish scraper.

Reading lessons grouped by CEFR level (A1-C1), each with a text and a
set of comprehension tasks.

Site structure:
- Listing pages: /skills/reading/<level>-reading, Drupal teasers/views rows
- Lesson pages: `.field--name-body` text, quiz questions or task blocks

NOTE: This site has anti-bot protection. Pauses are longer and an
access-denied page is turned into a blocked item instead of an error.
"""

from typing import List

from bs4 import BeautifulSoup

from ..base import (
    BaseScraper,
    ComprehensionExercise,
    Exercise,
    ItemReference,
    ScrapedItem,
    TaskExercise,
)
from ..config import get_site_config
from ..exceptions import FetchError
from ..utils.extractors import (
    collect_paragraphs,
    container_paragraphs,
    discover_links,
    extract_questions,
    extract_tasks,
    first_text,
    is_blocked_title,
    level_from_url,
    page_title,
)


LINK_SELECTORS = (
    'a[href*="/reading/"][href*="-reading/"]',
    '.node-teaser a',
    '.views-row a',
    'article a',
    '.content a[href*="reading"]',
)

TITLE_SELECTORS = ('h1', '.page-title')

CONTENT_SELECTORS = (
    '.field--name-body p',
    '.field--type-text-with-summary p',
    '.node__content p',
    '.article-body p',
    '.reading-text p',
    '.text-long p',
    'article p',
    '.content p',
)

MAIN_CONTAINERS = ('main', '.main-content', '#main-content', 'article')

QUESTION_SELECTORS = (
    '.quiz-question',
    '.question-text',
    '.task-item',
    'form .form-item',
    '.field--name-field-task',
    '[data-drupal-selector*="question"]',
)

MIN_PARAGRAPH_LENGTH = 30
MIN_BODY_LENGTH = 100

# Pause after each listing page fetch
LISTING_DELAY_MS = (1000, 2000)

CEFR_URL_PATTERN = r'\b([abc][12])-reading\b'


def is_lesson_url(url: str) -> bool:
    """Lesson pages live below a level section, not on the section itself."""
    return (
        '/reading/' in url
        and not url.rstrip('/').endswith('/reading')
        and not url.rstrip('/').endswith('-reading')
    )


class BritishCouncilScraper(BaseScraper):
    """
    Scraper for learnenglish.britishcouncil.org reading lessons.
    """

    FALLBACK_REFERENCES = (
        ItemReference(
            url='https://learnenglish.britishcouncil.org/skills/reading/a2-reading/a-message-to-a-new-colleague',
            title='A message to a new colleague',
            level='A2',
        ),
        ItemReference(
            url='https://learnenglish.britishcouncil.org/skills/reading/b1-reading/an-email-from-a-friend',
            title='An email from a friend',
            level='B1',
        ),
        ItemReference(
            url='https://learnenglish.britishcouncil.org/skills/reading/a1-reading/business-cards',
            title='Business cards',
            level='A1',
        ),
    )

    def __init__(self, crawler):
        super().__init__(get_site_config('britishcouncil'), crawler)

    async def discover_items(self, limit: int) -> List[ItemReference]:
        """Walk the per-level listing pages until `limit` lessons are found."""
        references: List[ItemReference] = []
        seen = set()

        for level, listing_url in self.config.listing_urls.items():
            if len(references) >= limit:
                break
            try:
                self.logger.info(f"Fetching {level} reading articles...")
                soup = await self.crawler.fetch_soup(listing_url)
                await self.policy.sleep(*LISTING_DELAY_MS)
            except FetchError as e:
                self.logger.warning(f"Could not fetch {level} articles: {e}")
                continue

            for url, text in discover_links(
                soup,
                LINK_SELECTORS,
                self.config.base_url,
                accept=is_lesson_url,
                limit=limit - len(references),
                seen=seen,
            ):
                references.append(ItemReference(url=url, title=text[:100], level=level))

        self.logger.info(f"Found {len(references)} reading articles")
        return self.resolve_references(references, limit)

    async def extract_item(self, reference: ItemReference) -> ScrapedItem:
        """Scrape one reading lesson."""
        soup = await self.crawler.fetch_soup(reference.url)

        title = (
            first_text(soup, TITLE_SELECTORS)
            or page_title(soup, '|')
            or reference.title
            or 'Untitled Reading'
        )
        if is_blocked_title(title):
            return self.blocked_result(reference)

        level = reference.level or level_from_url(reference.url, CEFR_URL_PATTERN)

        return self.format_result(
            title=title,
            level=self.normalize_level(level),
            body=self.parse_body(soup),
            exercises=self.parse_exercises(soup),
            url=reference.url,
        )

    def parse_body(self, soup: BeautifulSoup) -> str:
        """Reading text from the first content container that yields any."""
        body = collect_paragraphs(soup, CONTENT_SELECTORS, min_length=MIN_PARAGRAPH_LENGTH)
        if len(body) < MIN_BODY_LENGTH:
            fallback = container_paragraphs(soup, MAIN_CONTAINERS, min_length=MIN_PARAGRAPH_LENGTH)
            if len(fallback) > len(body):
                body = fallback
        return body

    def parse_exercises(self, soup: BeautifulSoup) -> List[Exercise]:
        """Comprehension questions, or task records when there are none."""
        exercises: List[Exercise] = [
            ComprehensionExercise(question=question, options=tuple(options))
            for question, options in extract_questions(soup, QUESTION_SELECTORS)
        ]
        if not exercises:
            exercises = [
                TaskExercise(instruction=instruction, description=description)
                for instruction, description in extract_tasks(soup)
            ]
        return exercises[:self.config.max_exercises]
