"""Cache record model.

A record couples a stored value with its absolute deadline and the timer
that will remove it. The record owns that timer: every path that drops
or replaces a record goes through release() so a superseded entry can
never be removed by a stale callback.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from expiring_cache.interfaces import Scheduler, TimerHandle

T = TypeVar("T")

# Wire-format marker for "never expires" (JSON has no infinity)
NEVER_SENTINEL = "NaN"


@dataclass(slots=True, eq=False)
class CacheRecord(Generic[T]):
    value: T
    expire_at: float  # epoch ms, math.inf when the record never expires
    timer: Optional[TimerHandle] = None

    @property
    def expires(self) -> bool:
        return math.isfinite(self.expire_at)

    def is_expired(self, now: float) -> bool:
        # Strict comparison: a record is still readable at its exact deadline
        return self.expire_at < now

    def release(self, scheduler: Scheduler) -> None:
        if self.timer is not None:
            scheduler.cancel(self.timer)
            self.timer = None

    def mark_fired(self) -> None:
        self.timer = None
