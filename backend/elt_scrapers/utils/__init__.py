"""Shared utilities for scrapers."""

from .normalizers import (
    CEFR_LEVELS,
    normalize_level,
    is_cefr,
    clean_text,
    clean_title,
    truncate,
)
from .extractors import (
    collect_paragraphs,
    discover_links,
    first_text,
    is_blocked_title,
    is_boilerplate,
)

__all__ = [
    'CEFR_LEVELS',
    'normalize_level',
    'is_cefr',
    'clean_text',
    'clean_title',
    'truncate',
    'collect_paragraphs',
    'discover_links',
    'first_text',
    'is_blocked_title',
    'is_boilerplate',
]
