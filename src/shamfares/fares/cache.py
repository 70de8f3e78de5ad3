"""Query-keyed cache for fetched fare collections.

Instances are created by the caller and passed to FareService; nothing is
cached at module level.
"""

import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple


class QueryCache:
    """In-memory cache with a time-to-live per entry."""

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_seconds: Lifetime of an entry; 0 disables caching.
            clock: Monotonic time source (seconds).
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = threading.Lock()
        # key -> [lock, number of callers holding or waiting on it]
        self._key_locks: Dict[Hashable, list] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store value for key; expired entries of other keys are swept."""
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            now = self._clock()
            self._sweep(now)
            self._entries[key] = (now + self.ttl_seconds, value)

    def get_or_fetch(self, key: Hashable, fetch: Callable[[], Any]) -> Any:
        """Return the cached value for key, calling fetch at most once at a time per key."""
        value = self.get(key)
        if value is not None:
            return value
        with self._lock:
            slot = self._key_locks.setdefault(key, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                value = self.get(key)
                if value is None:
                    value = fetch()
                    self.set(key, value)
                return value
        finally:
            with self._lock:
                slot[1] -= 1
                if slot[1] == 0 and self._key_locks.get(key) is slot:
                    del self._key_locks[key]

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        """Drop one entry, or everything when key is None (stale on navigation)."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def pending_keys(self) -> int:
        """Number of keys with a fetch in progress or waiting."""
        with self._lock:
            return len(self._key_locks)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for k in expired:
            del self._entries[k]

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)
