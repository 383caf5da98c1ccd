from __future__ import annotations

import time


class SystemClock:
    # Epoch milliseconds, integral like the deadlines in exported payloads
    def now(self) -> float:
        return time.time_ns() // 1_000_000
