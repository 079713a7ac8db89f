"""
Tests for the anti-detection policy.
"""

import asyncio
import random

import pytest

from elt_scrapers.crawlers.policy import DEFAULT_HEADERS, USER_AGENTS, AntiDetectionPolicy


class TestAntiDetectionPolicy:
    """Test identity rotation and pacing."""

    def test_user_agent_from_pool(self, policy):
        """Test that every picked identity comes from the pool."""
        for _ in range(20):
            assert policy.pick_user_agent() in USER_AGENTS

    def test_user_agent_pool_has_variety(self):
        assert len(set(USER_AGENTS)) >= 5

    def test_headers(self, policy):
        headers = policy.headers()
        assert headers['Accept-Language'].startswith('en-US')
        assert 'User-Agent' not in headers
        assert policy.headers('UA/1.0')['User-Agent'] == 'UA/1.0'

    def test_headers_are_a_copy(self, policy):
        policy.headers()['Accept'] = 'changed'
        assert DEFAULT_HEADERS['Accept'] != 'changed'

    def test_delay_within_default_bounds(self, policy):
        for _ in range(50):
            assert 2000 <= policy.delay_ms() <= 5000

    def test_delay_within_given_bounds(self, policy):
        for _ in range(50):
            assert 1000 <= policy.delay_ms(1000, 2000) <= 2000

    def test_equal_bounds(self, policy):
        assert policy.delay_ms(1500, 1500) == 1500

    def test_invalid_bounds(self, policy):
        with pytest.raises(ValueError):
            policy.delay_ms(3000, 1000)
        with pytest.raises(ValueError):
            AntiDetectionPolicy(5000, 2000)

    def test_sleep_uses_seconds(self, recording_sleep):
        """Test that sleep() awaits the pause converted to seconds."""
        policy = AntiDetectionPolicy(1000, 2000, sleep=recording_sleep, rng=random.Random(1))

        delay = asyncio.run(policy.sleep())

        assert 1000 <= delay <= 2000
        assert recording_sleep.calls == [delay / 1000]

    def test_sleep_override_bounds(self, policy, recording_sleep):
        delay = asyncio.run(policy.sleep(10, 20))
        assert 10 <= delay <= 20
        assert recording_sleep.calls[-1] == delay / 1000
