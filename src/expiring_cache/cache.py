"""In-memory key-value cache with optional per-entry TTL and expiry callbacks.

Every entry with a TTL gets its own one-shot timer from the injected
scheduler; when it fires the entry is removed and its callback (if any)
is invoked. Reads check the deadline lazily, so an entry past its deadline
reads as absent even before its timer has physically removed it. Until
then size() and keys() still include it.
"""

from __future__ import annotations

import json
import math
import threading
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from expiring_cache import config, wire
from expiring_cache.clock import SystemClock
from expiring_cache.errors import ValidationError
from expiring_cache.interfaces import Clock, Scheduler
from expiring_cache.log import get_logger
from expiring_cache.records import CacheRecord
from expiring_cache.scheduling import build_scheduler

T = TypeVar("T")

ExpireCallback = Callable[[str, T], None]

logger = get_logger(__name__)


def _check_ttl(ttl_ms: Optional[float]) -> None:
    if ttl_ms is None:
        return
    # bool is an int subclass but never a meaningful timeout
    if isinstance(ttl_ms, bool) or not isinstance(ttl_ms, (int, float)):
        raise ValidationError("Cache timeout must be a positive number")
    if not math.isfinite(ttl_ms) or ttl_ms <= 0:
        raise ValidationError("Cache timeout must be a positive number")


def _check_callback(on_expire: Optional[Callable[..., Any]]) -> None:
    if on_expire is not None and not callable(on_expire):
        raise ValidationError("Cache timeout callback must be a function")


def _render(value: Any) -> str:
    return json.dumps(value, default=repr)


class Cache(Generic[T]):
    """Key-value store whose entries may expire on their own.

    The scheduler and clock are collaborators: the cache schedules against
    them but does not own them. Hit/miss counters only move while debug
    mode is on, and clear() only resets them while debug mode is on.
    """

    def __init__(
        self,
        *,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
        debug: Optional[bool] = None,
    ) -> None:
        self._scheduler = scheduler if scheduler is not None else build_scheduler(config.CACHE_SCHEDULER)
        self._clock = clock if clock is not None else SystemClock()
        self._debug = config.CACHE_DEBUG if debug is None else bool(debug)
        self._entries: Dict[str, CacheRecord[T]] = {}
        self._hit_count = 0
        self._miss_count = 0
        # Timers may fire on other threads; all access to _entries goes through this
        self._lock = threading.RLock()

    def put(
        self,
        key: str,
        value: T,
        ttl_ms: Optional[float] = None,
        on_expire: Optional[ExpireCallback] = None,
    ) -> T:
        """Store value under key, replacing any existing entry in place.

        With ttl_ms the entry is removed after that many milliseconds and
        on_expire(key, value) is called. Returns value unchanged.
        """
        _check_ttl(ttl_ms)
        _check_callback(on_expire)

        if self._debug:
            logger.info("Caching: %s = %s (@%s)", key, _render(value), ttl_ms)

        with self._lock:
            old = self._entries.get(key)

            expire_at = math.inf if ttl_ms is None else self._clock.now() + ttl_ms
            record: CacheRecord[T] = CacheRecord(value=value, expire_at=expire_at)

            # Reassigning an existing key keeps its insertion position
            self._entries[key] = record

            if ttl_ms is not None:
                try:
                    record.timer = self._scheduler.schedule_once(
                        ttl_ms, lambda: self._expire(key, record, on_expire)
                    )
                except Exception:
                    # Old record and its timer stay exactly as they were
                    if old is None:
                        del self._entries[key]
                    else:
                        self._entries[key] = old
                    raise

            if old is not None:
                old.release(self._scheduler)

        return value

    def _expire(self, key: str, record: CacheRecord[T], on_expire: Optional[ExpireCallback]) -> None:
        with self._lock:
            # A superseded or deleted record must not remove its successor
            if self._entries.get(key) is not record:
                return
            record.mark_fired()
            del self._entries[key]

        if on_expire is not None:
            on_expire(key, record.value)

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            record = self._entries.get(key)
            if record is None or record.is_expired(self._clock.now()):
                if self._debug:
                    self._miss_count += 1
                return None

            if self._debug:
                self._hit_count += 1
            return record.value

    def delete(self, key: str) -> bool:
        with self._lock:
            record = self._entries.pop(key, None)
            if record is None:
                return False
            record.release(self._scheduler)

        logger.debug("Deleted cache key %s", key)
        return True

    def clear(self) -> None:
        with self._lock:
            for record in self._entries.values():
                record.release(self._scheduler)
            self._entries = {}
            if self._debug:
                self._hit_count = 0
                self._miss_count = 0

        logger.debug("Cleared cache")

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def debug(self, enabled: bool) -> None:
        self._debug = bool(enabled)

    def hits(self) -> int:
        return self._hit_count

    def misses(self) -> int:
        return self._miss_count

    def keys(self) -> List[str]:
        # Storage view: includes entries past their deadline whose timer has not fired yet
        with self._lock:
            return list(self._entries)

    def export_json(self) -> str:
        """Serialize every stored entry, expired or not, with absolute deadlines."""
        with self._lock:
            snapshot = list(self._entries.items())
        return wire.dumps(snapshot)

    def import_json(self, json_text: Union[str, bytes], *, skip_duplicates: bool = False) -> int:
        """Load entries produced by export_json and return the resulting size.

        Each entry is re-armed with whatever lifetime it has left relative
        to now; entries already past their deadline are dropped. With
        skip_duplicates, keys this cache already holds are left untouched.
        """
        entries = wire.loads(json_text)
        now = self._clock.now()
        imported = 0

        with self._lock:
            for key, (value, expire) in entries.items():
                remaining = wire.remaining_ms(expire, now)
                if remaining <= 0:
                    continue
                if skip_duplicates and key in self._entries:
                    continue

                self.put(key, value, remaining if math.isfinite(remaining) else None)
                imported += 1

            size = len(self._entries)

        logger.debug("Imported %d of %d cache entries", imported, len(entries))
        return size
