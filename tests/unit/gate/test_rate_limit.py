"""Tests for the fixed-window rate limiter."""

import pytest

from notevault.web.rate_limit import FixedWindowRateLimiter, MemoryRateLimitStore


class FakeClock:
    def __init__(self, start: float = 1_000_000.0) -> None:
        self.value = start

    def __call__(self) -> float:
        return self.value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryRateLimitStore()


@pytest.fixture
def limiter(store, clock):
    return FixedWindowRateLimiter(store, max_requests=3, window_seconds=60, clock=clock)


class TestFixedWindow:
    """Tests for counting and rejection within one window."""

    async def test_allows_up_to_ceiling(self, limiter):
        """Test that remaining counts down to zero within the ceiling."""
        results = [await limiter.hit("10.0.0.1") for _ in range(3)]

        assert all(result.allowed for result in results)
        assert [result.remaining for result in results] == [2, 1, 0]

    async def test_rejects_over_ceiling_with_retry_after(self, limiter, clock):
        """Test that the request after the ceiling is rejected with a retry hint."""
        for _ in range(3):
            await limiter.hit("10.0.0.1")
        clock.value += 15

        result = await limiter.hit("10.0.0.1")

        assert not result.allowed
        assert result.remaining == 0
        assert result.retry_after == 45

    async def test_retry_after_rounds_up(self, limiter, clock):
        """Test that a fractional wait is rounded up to whole seconds."""
        for _ in range(3):
            await limiter.hit("10.0.0.1")
        clock.value += 59.5

        assert (await limiter.hit("10.0.0.1")).retry_after == 1

    async def test_next_window_succeeds(self, limiter, clock):
        """Test that the counter starts over once the window has passed."""
        for _ in range(4):
            await limiter.hit("10.0.0.1")
        clock.value += 60

        result = await limiter.hit("10.0.0.1")

        assert result.allowed
        assert result.remaining == 2

    async def test_keys_are_independent(self, limiter):
        """Test that one client exhausting its window does not affect another."""
        for _ in range(4):
            await limiter.hit("10.0.0.1")

        assert (await limiter.hit("10.0.0.2")).allowed

    async def test_rejected_requests_are_not_counted(self, limiter, store):
        """Test that rejections leave the stored count at the ceiling."""
        for _ in range(6):
            await limiter.hit("10.0.0.1")

        counter = await store.get("10.0.0.1")
        assert counter is not None
        assert counter.count == 3


class TestHeaders:
    """Tests for reported rate limit headers."""

    async def test_headers(self, limiter, clock):
        """Test that limit, remaining and reset (epoch seconds) are reported."""
        result = await limiter.hit("10.0.0.1")

        assert result.headers() == {
            "X-RateLimit-Limit": "3",
            "X-RateLimit-Remaining": "2",
            "X-RateLimit-Reset": str(int(clock.value + 60)),
        }


class TestMemoryStore:
    """Tests for the in-process counter store."""

    async def test_expired_windows_are_purged(self, limiter, store, clock):
        """Test that counters for finished windows are dropped on the next hit."""
        await limiter.hit("10.0.0.1")
        await limiter.hit("10.0.0.2")
        clock.value += 61

        await limiter.hit("10.0.0.3")

        assert len(store) == 1
        assert await store.get("10.0.0.1") is None
