"""Core protocol definitions.

Defines the collaborators the cache schedules against (Scheduler, Clock)
and the handle contract a scheduler hands back, so the cache never
depends on a concrete timer facility.
"""

from __future__ import annotations

from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A pending one-shot timer that can be cancelled before it fires."""
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Contract for any timer facility (threads, asyncio loop, tests)."""
    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def cancel(self, handle: TimerHandle) -> None:
        # Must be a no-op when the timer already fired.
        ...


class Clock(Protocol):
    """Wall clock in epoch milliseconds."""
    def now(self) -> float:
        ...
