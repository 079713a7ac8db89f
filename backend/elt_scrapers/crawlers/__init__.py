"""Fetch engines and the anti-detection policy they share."""

from typing import Optional, Union

from .policy import AntiDetectionPolicy, USER_AGENTS
from .static import StaticCrawler
from .stealth import StealthCrawler

Crawler = Union[StealthCrawler, StaticCrawler]

FETCH_MODES = ('browser', 'static')


def build_crawler(settings, policy: Optional[AntiDetectionPolicy] = None) -> Crawler:
    """
    Create the fetch engine selected by settings.scraper_fetch_mode.

    Args:
        settings: Settings instance
        policy: Policy to share; built from settings when omitted

    Raises:
        ValueError: On an unknown fetch mode
    """
    policy = policy or AntiDetectionPolicy(
        min_delay_ms=settings.scraper_min_delay_ms,
        max_delay_ms=settings.scraper_max_delay_ms,
    )
    mode = settings.scraper_fetch_mode.lower()
    if mode == 'browser':
        return StealthCrawler(
            policy=policy,
            timeout=settings.scraper_timeout,
            settle_time=settings.scraper_settle_time,
            headless=settings.scraper_headless,
        )
    if mode == 'static':
        return StaticCrawler(
            policy=policy,
            timeout=settings.scraper_timeout,
            max_retries=settings.scraper_max_retries,
        )
    raise ValueError(f"Unknown fetch mode: '{settings.scraper_fetch_mode}'. Valid modes: {', '.join(FETCH_MODES)}")


__all__ = [
    'AntiDetectionPolicy',
    'USER_AGENTS',
    'StaticCrawler',
    'StealthCrawler',
    'Crawler',
    'FETCH_MODES',
    'build_crawler',
]
