import time
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import NamedTuple


class CacheEntry(NamedTuple):
    value: Any
    expires_at: float


class TTLCache:
    """
    Short-lived read cache over registry queries.

    Invalidation is coarse: every mutation drops all entries, and a query
    computed across an invalidation is returned to its caller but not stored.
    """

    def __init__(self, default_ttl: float = 5, clock: Callable[[], float] = time.monotonic):
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._generation = 0

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        self._entries[key] = CacheEntry(value, self._clock() + ttl)

    def invalidate_all(self) -> None:
        self._entries.clear()
        self._generation += 1

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[Any]], ttl: float | None = None) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        generation = self._generation
        value = await compute()
        if generation != self._generation:
            return value
        self.set(key, value, ttl)
        return value

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
