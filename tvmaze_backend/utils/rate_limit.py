from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

CATALOG = "catalog"
ENRICHMENT = "enrichment"


class RateLimitError(KeyError):
    pass


@dataclass(frozen=True)
class RateLimit:
    timespan_ms: int
    max_calls_per_timespan: int

    @property
    def delay_seconds(self) -> float:
        # Fixed spacing between calls rather than a sliding window.
        return (self.timespan_ms / self.max_calls_per_timespan) / 1000.0


class RateLimiter:
    """
    Blocks the caller between upstream calls of the same call class.
    """

    def __init__(
        self,
        limits: Mapping[str, RateLimit],
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        for name, limit in limits.items():
            if limit.max_calls_per_timespan <= 0:
                raise ValueError(f"Rate limit {name!r} needs max_calls_per_timespan > 0.")
            if limit.timespan_ms < 0:
                raise ValueError(f"Rate limit {name!r} needs timespan_ms >= 0.")
        self._limits = dict(limits)
        self._sleep = sleep

    def delay_for(self, call_class: str) -> float:
        limit = self._limits.get(call_class)
        if limit is None:
            raise RateLimitError(f"Unknown call class {call_class!r}")
        return limit.delay_seconds

    def wait(self, call_class: str) -> None:
        delay = self.delay_for(call_class)
        if delay > 0:
            logger.debug("Rate limit %s: sleeping %.3fs", call_class, delay)
            self._sleep(delay)


def build_rate_limiter(
    *,
    timespan_ms: int,
    catalog_calls: int,
    enrichment_calls: int,
    sleep: Callable[[float], None] = time.sleep,
) -> RateLimiter:
    return RateLimiter(
        {
            CATALOG: RateLimit(timespan_ms, catalog_calls),
            ENRICHMENT: RateLimit(timespan_ms, enrichment_calls),
        },
        sleep=sleep,
    )
