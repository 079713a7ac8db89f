"""
Base classes for the ELT content scraper system.

This module defines the data structures shared by all site scrapers and
the abstract base class they implement.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging

from .utils.extractors import MAX_OPTIONS
from .utils.normalizers import UNKNOWN_LEVEL, clean_title, normalize_level, truncate

logger = logging.getLogger(__name__)

# Bodies are cut to this length at extraction time
MAX_BODY_LENGTH = 5000

ARTIFACT_VERSION = '1.0.0'


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SiteConfig:
    """Configuration for a scraping source."""
    name: str                           # Source identifier written to items (e.g. 'BritishCouncil')
    key: str                            # Registry / CLI identifier (e.g. 'britishcouncil')
    base_url: str                       # Base URL for resolving links
    listing_urls: Dict[str, str] = field(default_factory=dict)  # label -> listing page
    min_delay_ms: int = 2000            # Pause before each item fetch
    max_delay_ms: int = 5000
    max_exercises: int = 10             # Cap on exercises per item
    aliases: Tuple[str, ...] = ()       # Extra CLI names
    enabled: bool = True                # Whether to include in full runs


# ============================================================
# EXERCISES
# ============================================================

@dataclass(frozen=True)
class VocabularyExercise:
    """A key word with an optional definition."""
    word: str
    definition: str = ''
    type: str = field(default='vocabulary', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'word': self.word, 'definition': self.definition}


@dataclass(frozen=True)
class ComprehensionExercise:
    """A reading question with up to four answer options."""
    question: str
    options: Tuple[str, ...] = ()
    type: str = field(default='comprehension', init=False)

    def __post_init__(self):
        object.__setattr__(self, 'options', tuple(self.options)[:MAX_OPTIONS])

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'question': self.question, 'options': list(self.options)}


@dataclass(frozen=True)
class TaskExercise:
    """A task instruction with a short description."""
    instruction: str
    description: str = ''
    type: str = field(default='task', init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'instruction': self.instruction, 'description': self.description}


Exercise = Union[VocabularyExercise, ComprehensionExercise, TaskExercise]


def exercise_from_dict(data: Dict[str, Any]) -> Exercise:
    """
    Rebuild an exercise record from its artifact form.

    Raises:
        ValueError: If the type tag is missing or unknown
    """
    exercise_type = data.get('type')
    if exercise_type == 'vocabulary':
        return VocabularyExercise(word=data.get('word', ''), definition=data.get('definition', ''))
    if exercise_type == 'comprehension':
        return ComprehensionExercise(question=data.get('question', ''), options=tuple(data.get('options', ())))
    if exercise_type == 'task':
        return TaskExercise(instruction=data.get('instruction', ''), description=data.get('description', ''))
    raise ValueError(f"Unknown exercise type: {exercise_type!r}")


# ============================================================
# ITEMS
# ============================================================

@dataclass(frozen=True)
class LevelLink:
    """Link to the same article at another difficulty level."""
    level: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {'level': self.level, 'url': self.url}


@dataclass(frozen=True)
class ItemReference:
    """A candidate content page found during discovery."""
    url: str
    title: str = ''
    level: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[str] = None
    available_levels: Tuple[LevelLink, ...] = ()


@dataclass(frozen=True)
class ScrapedItem:
    """Standardized teaching item after scraping. Immutable once built."""
    source: str
    level: str
    title: str
    body: str
    exercises: Tuple[Exercise, ...] = ()
    url: Optional[str] = None
    scraped_at: str = field(default_factory=utc_now_iso)
    blocked: bool = False
    available_levels: Optional[Tuple[LevelLink, ...]] = None
    description: Optional[str] = None

    def __post_init__(self):
        if not self.source:
            raise ValueError("ScrapedItem.source must not be empty")
        if not self.level:
            object.__setattr__(self, 'level', UNKNOWN_LEVEL)
        object.__setattr__(self, 'exercises', tuple(self.exercises))
        if self.available_levels is not None:
            object.__setattr__(self, 'available_levels', tuple(self.available_levels))

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'source': self.source,
            'level': self.level,
            'title': self.title,
            'body': self.body,
            'exercises': [exercise.to_dict() for exercise in self.exercises],
            'url': self.url,
            'scrapedAt': self.scraped_at,
            'blocked': self.blocked,
        }
        if self.available_levels is not None:
            data['availableLevels'] = [link.to_dict() for link in self.available_levels]
        if self.description is not None:
            data['description'] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScrapedItem':
        available = data.get('availableLevels')
        return cls(
            source=data['source'],
            level=data.get('level') or UNKNOWN_LEVEL,
            title=data.get('title', ''),
            body=data.get('body', ''),
            exercises=tuple(exercise_from_dict(e) for e in data.get('exercises') or ()),
            url=data.get('url'),
            scraped_at=data.get('scrapedAt', ''),
            blocked=bool(data.get('blocked', False)),
            available_levels=(
                tuple(LevelLink(level=link['level'], url=link['url']) for link in available)
                if available is not None else None
            ),
            description=data.get('description'),
        )


# ============================================================
# RUN RESULTS
# ============================================================

STATUS_SUCCESS = 'success'
STATUS_NO_DATA = 'no_data'
STATUS_ERROR = 'error'


@dataclass
class SourceStatus:
    """Outcome of one adapter within a run."""
    name: str
    status: str
    items_found: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'name': self.name, 'status': self.status, 'itemsFound': self.items_found}
        if self.error is not None:
            data['error'] = self.error
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SourceStatus':
        return cls(
            name=data['name'],
            status=data['status'],
            items_found=int(data.get('itemsFound', 0)),
            error=data.get('error'),
        )


@dataclass
class RunResult:
    """Result of one orchestrator execution."""
    scraped_at: str = field(default_factory=utc_now_iso)
    version: str = ARTIFACT_VERSION
    sources: List[SourceStatus] = field(default_factory=list)
    content: List[ScrapedItem] = field(default_factory=list)
    duration: Optional[str] = None

    @property
    def total_items(self) -> int:
        return len(self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metadata': {
                'scrapedAt': self.scraped_at,
                'version': self.version,
                'sources': [source.to_dict() for source in self.sources],
                'duration': self.duration,
                'totalItems': self.total_items,
            },
            'content': [item.to_dict() for item in self.content],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RunResult':
        metadata = data.get('metadata') or {}
        return cls(
            scraped_at=metadata.get('scrapedAt', ''),
            version=metadata.get('version', ARTIFACT_VERSION),
            sources=[SourceStatus.from_dict(s) for s in metadata.get('sources') or ()],
            content=[ScrapedItem.from_dict(item) for item in data.get('content') or ()],
            duration=metadata.get('duration'),
        )


# ============================================================
# SCRAPER CONTRACT
# ============================================================

class BaseScraper(ABC):
    """
    Abstract base class for all site scrapers.

    Subclasses must implement:
    - discover_items(): Find candidate content pages
    - extract_item(): Turn one page into a ScrapedItem

    The fetch engine (crawler) and the pacing policy it carries are
    composed in, not inherited.
    """

    # Used when discovery finds nothing (markup drift)
    FALLBACK_REFERENCES: Tuple[ItemReference, ...] = ()

    BLOCKED_BODY = '[BLOCKED] The site returned an anti-bot or access-denied page instead of content.'

    def __init__(self, config: SiteConfig, crawler):
        """
        Initialize the scraper.

        Args:
            config: Site configuration
            crawler: Fetch engine exposing fetch_soup() and policy
        """
        self.config = config
        self.crawler = crawler
        self.policy = crawler.policy
        self.logger = logging.getLogger(f"scraper.{config.key}")
        self.error_details: List[Dict[str, str]] = []

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    async def discover_items(self, limit: int) -> List[ItemReference]:
        """
        Find up to `limit` content pages.

        Returns:
            List of ItemReference objects with unique URLs
        """
        pass

    @abstractmethod
    async def extract_item(self, reference: ItemReference) -> ScrapedItem:
        """
        Fetch and parse one content page.

        Args:
            reference: Page found during discovery

        Returns:
            ScrapedItem (blocked=True when an access-denied page came back)
        """
        pass

    def normalize_level(self, level_text: Optional[str]) -> str:
        """Map a source level indicator to CEFR. Override for site quirks."""
        return normalize_level(level_text)

    def resolve_references(self, found: Sequence[ItemReference], limit: int) -> List[ItemReference]:
        """
        Deduplicate discovered references by URL and apply the static fallback.
        """
        unique = []
        seen = set()
        for reference in found:
            if reference.url in seen:
                continue
            seen.add(reference.url)
            unique.append(reference)

        if not unique:
            if self.FALLBACK_REFERENCES:
                self.logger.warning("Discovery found nothing, using fallback URLs...")
                unique = list(self.FALLBACK_REFERENCES)
            else:
                self.logger.warning("Discovery found nothing and no fallback URLs are configured")

        return unique[:limit]

    def format_result(
        self,
        title: str,
        level: Optional[str],
        body: str,
        exercises: Sequence[Exercise] = (),
        url: Optional[str] = None,
        blocked: bool = False,
        available_levels: Optional[Sequence[LevelLink]] = None,
        description: Optional[str] = None
    ) -> ScrapedItem:
        """Build a ScrapedItem with defaults applied and size caps enforced."""
        return ScrapedItem(
            source=self.name,
            level=level or UNKNOWN_LEVEL,
            title=clean_title(title) or 'Untitled',
            body=truncate(body, MAX_BODY_LENGTH),
            exercises=tuple(exercises)[:self.config.max_exercises],
            url=url,
            blocked=blocked,
            available_levels=tuple(available_levels) if available_levels is not None else None,
            description=description,
        )

    def blocked_result(self, reference: ItemReference) -> ScrapedItem:
        """Item returned instead of content when an access-denied page is served."""
        self.logger.warning(f"   {Colors.red('[BLOCKED]')} Access blocked for: {reference.url}")
        return self.format_result(
            title=reference.title or 'Access Blocked',
            level=reference.level,
            body=self.BLOCKED_BODY,
            url=reference.url,
            blocked=True,
        )

    async def run(self, limit: int = 3) -> List[ScrapedItem]:
        """
        Main entry point - discovery followed by per-item extraction.

        1. Discover candidate pages
        2. For each page, wait (policy) then extract
        3. Return the items that succeeded

        Discovery errors propagate; item errors are logged and skipped.
        """
        self.error_details = []
        if limit < 1:
            self.logger.warning(f"Nothing to scrape for {self.name}: limit is {limit}")
            return []

        self.logger.info(f"Starting scrape for {self.name}")

        references = (await self.discover_items(limit))[:limit]
        self.logger.info(f"Found {len(references)} item(s) to scrape")

        results: List[ScrapedItem] = []
        for idx, reference in enumerate(references, 1):
            try:
                await self.policy.sleep(self.config.min_delay_ms, self.config.max_delay_ms)
                self.logger.info(
                    f"{Colors.bold(f'[{idx}/{len(references)}]')} {reference.title or reference.url} "
                    f"{Colors.gray(f'({reference.url})')}"
                )
                item = await self.extract_item(reference)
                results.append(item)
                self.logger.info(
                    f"   ➤ level={item.level}, body={len(item.body)} chars, exercises={len(item.exercises)}"
                )

            except Exception as e:
                self.error_details.append({'url': reference.url, 'error': str(e)})
                self.logger.error(f"   {Colors.red('[ERR]')} Error scraping {reference.url}: {e}")
                # Continue to next item instead of failing the whole source

        self.logger.info(
            f"✅ {self.name} complete: {len(results)} item(s), {len(self.error_details)} error(s)"
        )
        return results
