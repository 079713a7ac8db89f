"""Per-site scraper implementations."""

from .breaking_news import BreakingNewsScraper
from .british_council import BritishCouncilScraper

__all__ = ['BreakingNewsScraper', 'BritishCouncilScraper']
