"""Token usage reporting.

The orchestrator reports every successful completion's token count through
``UsageReporter.report_usage``. What happens to the number (quota, billing,
logging) is the reporter's business.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger


class UsageReporter(Protocol):
    def report_usage(self, user_id: str, tokens: int) -> None:
        ...


class LoggingUsageReporter:
    """Reporter that only logs."""

    def report_usage(self, user_id: str, tokens: int) -> None:
        logger.info(f"Token usage: user={user_id} tokens={tokens}")


@dataclass
class TokenBucket:
    capacity: float
    refill_per_second: float
    tokens: float
    updated_at: float

    def refill(self, now: float) -> None:
        elapsed = max(0.0, now - self.updated_at)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_per_second)
        self.updated_at = now


class InMemoryUsageLedger:
    """Per-user token bucket.

    Usage is always recorded, even past the limit, so the bucket can go
    negative; ``has_capacity`` tells callers whether a user may start
    another generation.

    Attributes:
        capacity: Bucket size in tokens
        refill_per_minute: Tokens restored each minute
    """

    def __init__(
        self,
        capacity: int = 10000,
        refill_per_minute: int = 2000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = capacity
        self.refill_per_minute = refill_per_minute
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self.totals: dict[str, int] = {}

    def _bucket(self, user_id: str) -> TokenBucket:
        now = self._clock()
        bucket = self._buckets.get(user_id)
        if bucket is None:
            bucket = TokenBucket(
                capacity=self.capacity,
                refill_per_second=self.refill_per_minute / 60.0,
                tokens=self.capacity,
                updated_at=now,
            )
            self._buckets[user_id] = bucket
        bucket.refill(now)
        return bucket

    def report_usage(self, user_id: str, tokens: int) -> None:
        bucket = self._bucket(user_id)
        bucket.tokens -= tokens
        self.totals[user_id] = self.totals.get(user_id, 0) + tokens
        if bucket.tokens < 0:
            logger.warning(f"User {user_id} is over their token allowance ({bucket.tokens:.0f} remaining)")

    def remaining(self, user_id: str) -> float:
        return self._bucket(user_id).tokens

    def has_capacity(self, user_id: str) -> bool:
        return self.remaining(user_id) > 0
