"""Timer facilities the cache schedules expirations against.

- ThreadScheduler: one daemon threading.Timer per callback. Works without
  an event loop; callbacks run on worker threads.
- AsyncioScheduler: loop.call_later on an event loop. Callbacks interleave
  cooperatively with the loop's other work on a single thread.

Both accept delays in milliseconds and make cancel() safe to call on a
handle that already fired.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Callable, Optional

from expiring_cache.errors import ValidationError
from expiring_cache.interfaces import Scheduler, TimerHandle


class ThreadScheduler:
    def __init__(self, *, daemon: bool = True) -> None:
        self._daemon = daemon

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> threading.Timer:
        # Event.wait overflows past TIMEOUT_MAX (~292 years)
        delay_s = min(max(0.0, delay_ms) / 1000.0, threading.TIMEOUT_MAX)
        timer = threading.Timer(delay_s, callback)
        # Pending expirations must not keep the interpreter alive
        timer.daemon = self._daemon
        timer.start()
        return timer

    def cancel(self, handle: TimerHandle) -> None:
        # Timer.cancel() is a no-op once the timer has fired
        handle.cancel()


class AsyncioScheduler:
    def __init__(self, *, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        # Without an explicit loop, requires being called from a running loop
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay_ms) / 1000.0, callback)

    def cancel(self, handle: TimerHandle) -> None:
        handle.cancel()


def build_scheduler(name: str) -> Scheduler:
    kind = (name or "thread").strip().lower()
    if kind == "thread":
        return ThreadScheduler()
    if kind == "asyncio":
        return AsyncioScheduler()
    raise ValidationError(f"Unknown scheduler: {name!r}")
