"""Access to scraped ELT content for lesson-plan generation."""

from .loader import (
    ContentStatus,
    load_scraped_content,
    parse_content,
    get_valid_content,
    filter_by_level,
    filter_by_approximate_level,
    select_content,
    get_best_content_for_lesson,
    get_all_content_for_level,
    format_content_for_prompt,
    is_content_available,
)

__all__ = [
    'ContentStatus',
    'load_scraped_content',
    'parse_content',
    'get_valid_content',
    'filter_by_level',
    'filter_by_approximate_level',
    'select_content',
    'get_best_content_for_lesson',
    'get_all_content_for_level',
    'format_content_for_prompt',
    'is_content_available',
]
