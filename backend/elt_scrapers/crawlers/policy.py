"""
Anti-detection policy shared by every crawler.

Supplies a rotating browser identity, realistic request headers and
randomized pauses between requests. This lowers the chance of being
blocked; it does not prevent it.

Example:
    >>> policy = AntiDetectionPolicy(min_delay_ms=2000, max_delay_ms=5000)
    >>> await policy.sleep()            # 2-5 seconds
    >>> await policy.sleep(1000, 2000)  # 1-2 seconds
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Real desktop browser identities
USER_AGENTS = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36 Edg/119.0.0.0',
)

DEFAULT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept-Encoding': 'gzip, deflate, br',
    'Connection': 'keep-alive',
    'Upgrade-Insecure-Requests': '1',
    'Sec-Fetch-Dest': 'document',
    'Sec-Fetch-Mode': 'navigate',
    'Sec-Fetch-Site': 'none',
    'Sec-Fetch-User': '?1',
    'Cache-Control': 'max-age=0',
}


class AntiDetectionPolicy:
    """
    Identity rotation and request pacing.

    Attributes:
        min_delay_ms: Default lower bound for sleep()
        max_delay_ms: Default upper bound for sleep()
    """

    def __init__(
        self,
        min_delay_ms: int = 2000,
        max_delay_ms: int = 5000,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Args:
            min_delay_ms: Default minimum pause in milliseconds
            max_delay_ms: Default maximum pause in milliseconds
            sleep: Coroutine used to pause (seconds); asyncio.sleep by default
            rng: Random source; module-level random by default
        """
        if min_delay_ms > max_delay_ms:
            raise ValueError(f"min_delay_ms ({min_delay_ms}) > max_delay_ms ({max_delay_ms})")
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep or asyncio.sleep
        self._rng = rng or random.Random()

    def pick_user_agent(self) -> str:
        """Choose a browser identity uniformly at random."""
        return self._rng.choice(USER_AGENTS)

    def headers(self, user_agent: Optional[str] = None) -> Dict[str, str]:
        """Extra request headers; includes User-Agent when given."""
        headers = dict(DEFAULT_HEADERS)
        if user_agent:
            headers['User-Agent'] = user_agent
        return headers

    def delay_ms(self, min_ms: Optional[int] = None, max_ms: Optional[int] = None) -> int:
        """Draw a pause length uniformly from [min_ms, max_ms]."""
        low = self.min_delay_ms if min_ms is None else min_ms
        high = self.max_delay_ms if max_ms is None else max_ms
        if low > high:
            raise ValueError(f"Delay lower bound {low}ms exceeds upper bound {high}ms")
        return self._rng.randint(low, high)

    async def sleep(self, min_ms: Optional[int] = None, max_ms: Optional[int] = None) -> int:
        """
        Pause the calling flow for a random duration.

        Returns:
            The pause length in milliseconds
        """
        delay = self.delay_ms(min_ms, max_ms)
        logger.debug(f"Waiting {delay}ms...")
        await self._sleep(delay / 1000)
        return delay
