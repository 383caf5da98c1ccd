import pytest


class FakeClock:
    """Controllable epoch-millisecond clock."""

    def __init__(self, start: float = 1_700_000_000_000) -> None:
        self.now_ms = start

    def now(self) -> float:
        return self.now_ms


class ManualTimer:
    def __init__(self, due: float, callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler stand-in that only fires when the test advances time."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.timers = []

    def schedule_once(self, delay_ms, callback):
        timer = ManualTimer(self.clock.now_ms + delay_ms, callback)
        self.timers.append(timer)
        return timer

    def cancel(self, handle) -> None:
        handle.cancel()

    def pending(self):
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, ms: float) -> None:
        self.clock.now_ms += ms
        for timer in sorted(self.pending(), key=lambda t: t.due):
            if timer.due <= self.clock.now_ms and not timer.cancelled:
                timer.fired = True
                timer.callback()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualScheduler(clock)


@pytest.fixture
def cache(scheduler, clock):
    from expiring_cache.cache import Cache

    return Cache(scheduler=scheduler, clock=clock, debug=False)
