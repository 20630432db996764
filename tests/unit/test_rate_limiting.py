"""
Unit tests for the inbound rate limiter
"""

import pytest

from app.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.unit
class TestRateLimiter:

    def setup_method(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(limit=3, window_seconds=60, clock=self.clock)

    def test_allows_up_to_limit(self):
        decisions = [self.limiter.check("1.2.3.4") for _ in range(3)]
        assert all(d.allowed for d in decisions)
        assert decisions[-1].remaining == 0

    def test_rejects_over_limit_with_retry_after(self):
        for _ in range(3):
            self.limiter.check("1.2.3.4")
        self.clock.now += 10

        decision = self.limiter.check("1.2.3.4")

        assert not decision.allowed
        assert decision.retry_after == 50
        assert decision.headers()["Retry-After"] == "50"

    def test_window_slides(self):
        for _ in range(3):
            self.limiter.check("1.2.3.4")
        self.clock.now += 61
        assert self.limiter.check("1.2.3.4").allowed

    def test_clients_are_independent(self):
        for _ in range(3):
            self.limiter.check("1.2.3.4")
        assert self.limiter.check("5.6.7.8").allowed

    def test_cleanup_and_reset(self):
        self.limiter.check("1.2.3.4")
        self.clock.now += 120
        assert self.limiter.cleanup() == 1

        for _ in range(3):
            self.limiter.check("1.2.3.4")
        self.limiter.reset(limit=3)
        assert self.limiter.check("1.2.3.4").allowed

    def test_idle_clients_dropped_periodically(self):
        limiter = RateLimiter(limit=3, window_seconds=60, clock=self.clock, cleanup_every=3)
        limiter.check("1.2.3.4")
        limiter.check("5.6.7.8")
        self.clock.now += 120

        limiter.check("9.9.9.9")

        assert set(limiter._requests) == {"9.9.9.9"}
