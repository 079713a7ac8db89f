"""
Content Loader - reads scraped ELT content for lesson plans.

Reads the scraper's run artifact and picks authentic material matching
a lesson's CEFR level (and optionally its topic) for prompt building.
"""

import json
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from elt_scrapers.base import RunResult, ScrapedItem
from elt_scrapers.settings import settings
from elt_scrapers.utils.normalizers import CEFR_LEVELS, normalize_level

logger = logging.getLogger(__name__)

BLOCKED_MARKER = '[BLOCKED]'
MAX_PROMPT_VOCABULARY = 10


@dataclass(frozen=True)
class ContentStatus:
    """Availability summary of the scraped content artifact."""
    available: bool
    item_count: int
    last_scraped: Optional[str]


def parse_content(data: Dict[str, Any]) -> RunResult:
    """Build a RunResult from a decoded content.json document."""
    return RunResult.from_dict(data)


def load_scraped_content(path: Optional[Path] = None) -> Optional[RunResult]:
    """
    Load the run artifact.

    Returns:
        RunResult, or None when the file is missing or unreadable
    """
    file_path = Path(path) if path else settings.content_file

    if not file_path.exists():
        logger.info(f"No scraped content file found at: {file_path}")
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            result = parse_content(json.load(f))
    except (OSError, KeyError, ValueError, TypeError, AttributeError) as e:
        logger.error(f"Error loading scraped content from {file_path}: {e}")
        return None

    logger.info(f"Loaded {result.total_items} scraped items from {len(result.sources)} sources")
    return result


def get_valid_content(items: Sequence[ScrapedItem], min_body_length: int = 100) -> List[ScrapedItem]:
    """Items usable for a lesson: not blocked, with a real body."""
    return [
        item for item in items
        if not item.blocked
        and item.body
        and len(item.body) > min_body_length
        and BLOCKED_MARKER not in item.body
        and 'access denied' not in item.title.lower()
    ]


def filter_by_level(items: Sequence[ScrapedItem], target_level: str) -> List[ScrapedItem]:
    """Items whose normalized level equals the normalized target."""
    target = normalize_level(target_level)
    return [item for item in items if normalize_level(item.level) == target]


def filter_by_approximate_level(items: Sequence[ScrapedItem], target_level: str) -> List[ScrapedItem]:
    """
    Items at the target level or one CEFR step away.

    A target that is not a CEFR level leaves the input unfiltered.
    """
    target = normalize_level(target_level)
    if target not in CEFR_LEVELS:
        return list(items)

    index = CEFR_LEVELS.index(target)
    valid_levels = set(CEFR_LEVELS[max(index - 1, 0):index + 2])
    return [item for item in items if normalize_level(item.level) in valid_levels]


def _matches_topic(item: ScrapedItem, topic: str) -> bool:
    topic = topic.lower()
    return (
        topic in item.title.lower()
        or topic in item.body.lower()
        or bool(item.description and topic in item.description.lower())
    )


def select_content(
    items: Sequence[ScrapedItem],
    level: str,
    topic: Optional[str] = None,
    rng: Optional[random.Random] = None
) -> Optional[ScrapedItem]:
    """
    Pick one item for a lesson.

    Candidates are the exact-level items, else the adjacent-level items,
    else everything. Among several candidates the first topic match wins;
    otherwise one is chosen at random.
    """
    if not items:
        return None

    candidates = filter_by_level(items, level)
    if not candidates:
        candidates = filter_by_approximate_level(items, level)
    if not candidates:
        candidates = list(items)

    if topic and len(candidates) > 1:
        for item in candidates:
            if _matches_topic(item, topic):
                return item

    return (rng or random).choice(candidates)


def get_best_content_for_lesson(
    level: str,
    topic: Optional[str] = None,
    path: Optional[Path] = None
) -> Optional[ScrapedItem]:
    """Best matching valid item from the artifact, or None."""
    result = load_scraped_content(path)
    if result is None:
        return None

    valid = get_valid_content(result.content, settings.loader_min_body_length)
    if not valid:
        logger.info("No valid content available")
        return None

    return select_content(valid, level, topic)


def get_all_content_for_level(level: str, path: Optional[Path] = None) -> List[ScrapedItem]:
    """All valid items at or next to the given level."""
    result = load_scraped_content(path)
    if result is None:
        return []

    valid = get_valid_content(result.content, settings.loader_min_body_length)
    return filter_by_approximate_level(valid, level)


def format_content_for_prompt(item: ScrapedItem, max_body_length: Optional[int] = None) -> str:
    """
    Render an item as a text block for a generation prompt.

    The body is cut to max_body_length (settings.loader_prompt_body_limit,
    2000 by default); at most ten vocabulary items are listed.
    """
    if max_body_length is None:
        max_body_length = settings.loader_prompt_body_limit

    formatted = (
        "\n=== AUTHENTIC TEACHING MATERIAL ===\n"
        f"Source: {item.source}\n"
        f"Level: {normalize_level(item.level)}\n"
        f"Title: {item.title}\n"
        "\n"
        "ARTICLE TEXT:\n"
        f"{item.body[:max_body_length]}\n"
    )

    vocabulary = [
        e for e in item.exercises
        if e.type == 'vocabulary' and e.word
    ][:MAX_PROMPT_VOCABULARY]
    if vocabulary:
        lines = [f"- {v.word}: {v.definition}" if v.definition else f"- {v.word}" for v in vocabulary]
        formatted += "\nKEY VOCABULARY:\n" + '\n'.join(lines) + '\n'

    if item.description:
        formatted += f"\nBRIEF SUMMARY:\n{item.description}\n"

    return formatted


def is_content_available(path: Optional[Path] = None) -> ContentStatus:
    """Whether any valid content exists, how much, and when it was scraped."""
    result = load_scraped_content(path)
    if result is None:
        return ContentStatus(available=False, item_count=0, last_scraped=None)

    valid = get_valid_content(result.content, settings.loader_min_body_length)
    return ContentStatus(
        available=bool(valid),
        item_count=len(valid),
        last_scraped=result.scraped_at or None,
    )
