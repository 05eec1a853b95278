"""
Process-wide get-or-compute cache for price resolutions.

Entries expire a fixed time after they are written and the entry count is
bounded with least-recently-used eviction. Absent results are cached as the
``ABSENT`` marker so a query with no applicable price does not hit storage
again until the entry expires.

An explicit invalidation (``evict`` or ``clear``) that lands while a
compute is pending makes that compute's result uncacheable: the value is
still returned to its callers but never written.
"""

import asyncio
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional

from ..config.defaults import CacheParams
from ..errors import CacheUnavailableError
from ..logging.config import get_cache_logger

cache_logger = get_cache_logger(__name__)


class _Absent:
    """Marker for a resolution that completed with no applicable price."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

Compute = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class CacheEntry:
    """A stored resolution. ``value`` is a PriceRecord or ABSENT."""
    key: str
    value: Any
    inserted_at: float


@dataclass
class CacheStats:
    """Counters for cache observability."""
    hits: int = 0
    misses: int = 0
    stores: int = 0
    evictions: int = 0
    expirations: int = 0
    stale_writes: int = 0
    degraded: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class ResolutionCache:
    """
    TTL + LRU cache keyed by string.

    The internal store is guarded by a ``threading.Lock`` that is never held
    across an ``await``. A cache whose store is unavailable (built with
    ``disabled()`` or after ``close()``) still answers every call by running
    ``compute`` directly.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_size: int = 1000,
        deduplicate_inflight: bool = False,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.deduplicate_inflight = deduplicate_inflight
        self.logger = cache_logger

        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Optional[OrderedDict[str, CacheEntry]] = OrderedDict() if enabled else None
        # keyed by (event loop, cache key); a task is only awaited from its own loop
        self._inflight: dict[tuple[asyncio.AbstractEventLoop, str], asyncio.Future] = {}
        self._generation = 0
        self._stats = CacheStats()

    @classmethod
    def from_params(cls, params: CacheParams, clock: Callable[[], float] = time.monotonic) -> "ResolutionCache":
        return cls(
            ttl_seconds=params.ttl_seconds,
            max_size=params.max_size,
            deduplicate_inflight=params.deduplicate_inflight,
            clock=clock,
            enabled=params.enabled,
        )

    @classmethod
    def disabled(cls) -> "ResolutionCache":
        """A cache with no backing store; every lookup is computed directly."""
        return cls(enabled=False)

    @property
    def available(self) -> bool:
        return self._entries is not None

    async def get_or_compute(self, key: str, compute: Compute) -> Any:
        """
        Return the cached value for ``key`` or compute, store and return it.

        Returns a PriceRecord or None. Exceptions raised by ``compute``
        propagate and leave nothing cached. If the caller is cancelled while
        ``compute`` is pending, the write is skipped. The write is also skipped
        when ``evict`` or ``clear`` ran while ``compute`` was pending.
        """
        try:
            entry, generation = self._lookup(key)
        except CacheUnavailableError as e:
            self._record_degraded(key, e)
            return await compute()

        if entry is not None:
            self.logger.debug("Cache hit", cache_key=key)
            return _unwrap(entry.value)

        self.logger.debug("Cache miss", cache_key=key)

        if self.deduplicate_inflight:
            return await self._compute_shared(key, compute, generation)

        value = await compute()
        self._store_quietly(key, value, generation)
        return value

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key`` without touching LRU order."""
        with self._lock:
            if self._entries is None:
                return None
            entry = self._entries.get(key)
            if entry is None or self._is_expired(entry):
                return None
            return entry

    def evict(self, key: str) -> bool:
        """Remove one entry. Returns True if something was removed."""
        with self._lock:
            self._generation += 1
            if self._entries is None:
                return False
            removed = self._entries.pop(key, None) is not None

        if removed:
            self.logger.debug("Evicted cache entry", cache_key=key)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            if self._entries is None:
                return
            count = len(self._entries)
            self._entries.clear()

        self.logger.info("Cleared resolution cache", entries_removed=count)

    def close(self) -> None:
        """Drop the backing store; later lookups degrade to direct computation."""
        with self._lock:
            self._entries = None
        self.logger.info("Resolution cache closed")

    def stats(self) -> dict[str, Any]:
        with self._lock:
            data: dict[str, Any] = self._stats.to_dict()
            data["size"] = len(self._entries) if self._entries is not None else 0
        data["available"] = self.available
        data["max_size"] = self.max_size
        data["ttl_seconds"] = self.ttl_seconds
        return data

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries) if self._entries is not None else 0

    def __contains__(self, key: str) -> bool:
        return self.peek(key) is not None

    def _lookup(self, key: str) -> tuple[Optional[CacheEntry], int]:
        """Return the live entry (or None) and the invalidation generation seen."""
        with self._lock:
            if self._entries is None:
                raise CacheUnavailableError("Resolution cache storage is not initialized", cache_key=key)

            generation = self._generation
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None, generation

            if self._is_expired(entry):
                del self._entries[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                return None, generation

            self._entries.move_to_end(key)
            self._stats.hits += 1
            return entry, generation

    def _store(self, key: str, value: Any, generation: int) -> None:
        stored = ABSENT if value is None else value
        evicted = []

        with self._lock:
            if self._entries is None:
                raise CacheUnavailableError("Resolution cache storage is not initialized", cache_key=key)

            if generation != self._generation:
                self._stats.stale_writes += 1
                stale = True
            else:
                stale = False
                self._entries[key] = CacheEntry(key=key, value=stored, inserted_at=self._clock())
                self._entries.move_to_end(key)
                self._stats.stores += 1

                while len(self._entries) > self.max_size:
                    old_key, _ = self._entries.popitem(last=False)
                    self._stats.evictions += 1
                    evicted.append(old_key)

        if stale:
            self.logger.debug("Skipped write invalidated during compute", cache_key=key)
            return

        self.logger.debug("Cached resolution", cache_key=key, absent=stored is ABSENT)
        for old_key in evicted:
            self.logger.debug("Evicted least recently used entry", cache_key=old_key)

    def _store_quietly(self, key: str, value: Any, generation: int) -> None:
        try:
            self._store(key, value, generation)
        except CacheUnavailableError as e:
            self._record_degraded(key, e)

    async def _compute_shared(self, key: str, compute: Compute, generation: int) -> Any:
        """
        Join an in-flight computation for ``key`` or start one.

        Only tasks started on the caller's own event loop are joined; a caller
        on another thread's loop starts its own computation.
        """
        loop = asyncio.get_running_loop()
        inflight_key = (loop, key)

        with self._lock:
            task = self._inflight.get(inflight_key)
            joined = task is not None
            if task is None:
                task = loop.create_task(compute())
                self._inflight[inflight_key] = task

        if joined:
            self.logger.debug("Joining in-flight resolution", cache_key=key)
        else:
            task.add_done_callback(lambda done: self._finish_shared(inflight_key, generation, done))

        # shield: cancelling one waiter leaves the shared task running
        return await asyncio.shield(task)

    def _finish_shared(
        self,
        inflight_key: tuple[asyncio.AbstractEventLoop, str],
        generation: int,
        task: asyncio.Future
    ) -> None:
        with self._lock:
            if self._inflight.get(inflight_key) is task:
                del self._inflight[inflight_key]
        if task.cancelled() or task.exception() is not None:
            return
        self._store_quietly(inflight_key[1], task.result(), generation)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.inserted_at >= self.ttl_seconds

    def _record_degraded(self, key: str, error: CacheUnavailableError) -> None:
        with self._lock:
            self._stats.degraded += 1
        self.logger.warning(
            "Resolution cache unavailable, computing without cache",
            cache_key=key,
            error=str(error),
            fallback_strategy=error.fallback_strategy,
        )


def _unwrap(value: Any) -> Any:
    return None if value is ABSENT else value
