"""JSON interchange format for exporting and importing cache contents.

Shape: {"<key>": {"value": <json>, "expire": <epoch ms> | "NaN"}}.
Numeric deadlines are absolute, so an importer recomputes how much
lifetime is left instead of restarting the original TTL.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from expiring_cache.errors import ImportFormatError
from expiring_cache.records import NEVER_SENTINEL, CacheRecord

Deadline = Union[float, str]


def encode_deadline(record: CacheRecord[Any]) -> Deadline:
    if record.expires:
        return record.expire_at
    return NEVER_SENTINEL


def remaining_ms(expire: Any, now: float) -> float:
    # Anything that is not a finite number (the "NaN" marker, a missing
    # deadline, NaN/Infinity literals) means the entry never expires.
    if isinstance(expire, bool) or not isinstance(expire, (int, float)):
        return math.inf
    if not math.isfinite(expire):
        return math.inf
    return expire - now


def dumps(records: Iterable[Tuple[str, CacheRecord[Any]]]) -> str:
    payload: Dict[str, Dict[str, Any]] = {}
    for key, record in records:
        payload[key] = {"value": record.value, "expire": encode_deadline(record)}
    return json.dumps(payload, separators=(",", ":"))


def loads(json_text: Union[str, bytes]) -> Dict[str, Tuple[Any, Any]]:
    # Validate the whole payload up front so a bad entry never leaves a
    # partially imported cache behind.
    try:
        raw = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Invalid cache export: {e}") from e

    if not isinstance(raw, Mapping):
        raise ImportFormatError("Cache export must be a JSON object")

    entries: Dict[str, Tuple[Any, Any]] = {}
    for key, entry in raw.items():
        if not isinstance(entry, Mapping) or "value" not in entry:
            raise ImportFormatError(f"Cache export entry {key!r} must be an object with a value")
        entries[key] = (entry["value"], entry.get("expire"))
    return entries
