"""
Fixed-window rate limiting

Counts requests per client key inside discrete windows; the counter starts
over once the window's reset instant has passed. Counters live in a
RateLimitStore so a shared store can replace the in-process one when several
instances serve the same clients.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


@dataclass
class WindowCounter:
    """Requests seen in the current window and when that window ends (epoch seconds)."""

    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int = 0

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(math.ceil(self.reset_at)),
        }


class RateLimitStore(Protocol):
    async def get(self, key: str) -> WindowCounter | None: ...

    async def put(self, key: str, counter: WindowCounter) -> None: ...

    async def purge_expired(self, now: float) -> None: ...


class MemoryRateLimitStore:
    """Process-local counters, lost on restart."""

    def __init__(self) -> None:
        self._counters: dict[str, WindowCounter] = {}

    async def get(self, key: str) -> WindowCounter | None:
        return self._counters.get(key)

    async def put(self, key: str, counter: WindowCounter) -> None:
        self._counters[key] = counter

    async def purge_expired(self, now: float) -> None:
        for key in [key for key, counter in self._counters.items() if counter.reset_at <= now]:
            del self._counters[key]

    def __len__(self) -> int:
        return len(self._counters)


class FixedWindowRateLimiter:
    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int = 100,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            store: Where window counters are kept
            max_requests: Requests allowed per key and window
            window_seconds: Window length
            clock: Source of the current epoch time
        """
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    async def hit(self, key: str) -> RateLimitResult:
        """Count one request for key; rejected requests are not counted."""
        now = self._clock()
        await self.store.purge_expired(now)

        counter = await self.store.get(key)
        if counter is None or counter.reset_at <= now:
            counter = WindowCounter(count=0, reset_at=now + self.window_seconds)

        if counter.count >= self.max_requests:
            return RateLimitResult(
                allowed=False,
                limit=self.max_requests,
                remaining=0,
                reset_at=counter.reset_at,
                retry_after=max(1, math.ceil(counter.reset_at - now)),
            )

        counter.count += 1
        await self.store.put(key, counter)
        return RateLimitResult(
            allowed=True,
            limit=self.max_requests,
            remaining=self.max_requests - counter.count,
            reset_at=counter.reset_at,
        )
