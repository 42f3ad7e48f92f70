"""
tcg_market/services/cache.py – in-memory TTL cache for upstream card responses.

Entries expire `ttl_seconds` after they were stored; expiry is only checked
on lookup, there is no background sweeper. The cache holds at most
`max_entries` keys and evicts the oldest *inserted* key when that bound is
exceeded (FIFO, reads do not refresh an entry's position).
"""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional


@dataclass
class CacheEntry:
    key: str
    payload: Any
    stored_at: float


def make_cache_key(params: Iterable[tuple[str, str]]) -> str:
    """Serialise query parameters to compact JSON, keeping the received order.

    A name that appears more than once maps to the list of its values.
    """
    grouped: dict[str, Any] = {}
    for name, value in params:
        if name not in grouped:
            grouped[name] = value
        elif isinstance(grouped[name], list):
            grouped[name].append(value)
        else:
            grouped[name] = [grouped[name], value]
    return json.dumps(grouped, separators=(",", ":"), ensure_ascii=False)


class ResponseCache:
    """Bounded key/value store with per-entry TTL and FIFO eviction."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock

    # ── Public API ────────────────────────────────────────────────────────────

    def lookup(self, key: str) -> Optional[Any]:
        """Return the cached payload or None (also removes an expired entry)."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self._ttl:
            del self._store[key]
            return None
        return entry.payload

    def store(self, key: str, payload: Any) -> None:
        """Store a payload, then evict the oldest entry if over capacity."""
        # Overwriting an existing key keeps its original insertion position.
        self._store[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())
        if len(self._store) > self._max_entries:
            oldest = next(iter(self._store))
            del self._store[oldest]

    def keys(self) -> list[str]:
        return list(self._store)

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)
