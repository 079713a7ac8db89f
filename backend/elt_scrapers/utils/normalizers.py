"""
Data normalization utilities for scrapers.

These functions standardize scraped data into consistent formats.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

CEFR_LEVELS = ('A1', 'A2', 'B1', 'B2', 'C1', 'C2')

UNKNOWN_LEVEL = 'Unknown'

# Descriptive level words. Checked longest first so that
# "upper-intermediate" never matches "intermediate".
DESCRIPTIVE_LEVELS = {
    'beginner': 'A1',
    'elementary': 'A2',
    'pre-intermediate': 'B1',
    'intermediate': 'B1',
    'upper-intermediate': 'B2',
    'upper intermediate': 'B2',
    'advanced': 'C1',
    'proficiency': 'C2',
}

_CEFR_RE = re.compile(r'\b([abc][12])\b', re.IGNORECASE)
_NUMERIC_LEVEL_RE = re.compile(r'level\s*(\d+)', re.IGNORECASE)
_CONTROL_CHARS_RE = re.compile(r'[\x00-\x1f\x7f]')


def numeric_level_to_cefr(level_num: int) -> str:
    """
    Map the 0-6 "Level N" scale used by Breaking News English to CEFR.

    Examples:
        0, 1 -> A1
        2 -> A2
        3, 4 -> B1
        5 -> B2
        6 -> C1
    """
    if level_num <= 1:
        return 'A1'
    if level_num == 2:
        return 'A2'
    if level_num <= 4:
        return 'B1'
    if level_num == 5:
        return 'B2'
    return 'C1'


def normalize_level(level_text: Optional[str]) -> str:
    """
    Normalize a source level indicator to a CEFR code.

    Examples:
        b1 -> B1
        B2 Reading -> B2
        Level 3 -> B1
        Upper intermediate -> B2
        Beginners' corner -> A1
        Mixed -> Mixed (unmapped, passed through)
        "" -> Unknown
    """
    if not level_text or not level_text.strip():
        return UNKNOWN_LEVEL

    text = level_text.strip()

    cefr_match = _CEFR_RE.search(text)
    if cefr_match:
        return cefr_match.group(1).upper()

    numeric_match = _NUMERIC_LEVEL_RE.search(text)
    if numeric_match:
        return numeric_level_to_cefr(int(numeric_match.group(1)))

    text_lower = text.lower()
    for word in sorted(DESCRIPTIVE_LEVELS, key=len, reverse=True):
        if word in text_lower:
            return DESCRIPTIVE_LEVELS[word]

    if text != UNKNOWN_LEVEL:
        logger.debug(f"No CEFR mapping for level '{text}', keeping as is")
    return text


def is_cefr(level: Optional[str]) -> bool:
    """Check whether a level string is exactly one of the CEFR codes."""
    return bool(level) and level in CEFR_LEVELS


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace and strip control characters."""
    if not text:
        return ''
    text = _CONTROL_CHARS_RE.sub(' ', text)
    return ' '.join(text.split())


def clean_title(title: Optional[str], max_length: int = 100) -> str:
    """
    Normalize a title for storage.

    Examples:
        "  Business\\n   cards " -> "Business cards"
    """
    return clean_text(title)[:max_length].strip()


def truncate(text: Optional[str], max_length: int) -> str:
    """Cut text to at most max_length characters."""
    if not text:
        return ''
    return text[:max_length]
