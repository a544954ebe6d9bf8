"""
Proxy Cache Manager
代理缓存管理器

In-memory, per-URL cache of upstream responses.

Features:
- One entry per distinct URL, created lazily and never removed
- Per-entry readers/writer lock (no global lock on the hot path)
- Host-specific expiry (see expiry.py)
- Optional coalescing of concurrent misses on the same URL
"""

import logging
import threading
import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Tuple
from urllib.parse import urlsplit

from .allow_list import target_host
from .expiry import ttl_for_host
from .fetcher import UpstreamFetcher

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Readers/writer lock
    读写锁

    Any number of readers may hold the lock together; a writer holds it alone.
    Waiting writers block new readers so a busy entry cannot starve a refresh.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def _release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            self._release_read()

    @contextmanager
    def read_locked_nowait(self) -> Iterator[bool]:
        """Shared lock if no writer holds or awaits it; yields whether it was taken."""
        with self._cond:
            acquired = not (self._writer or self._writers_waiting)
            if acquired:
                self._readers += 1
        try:
            yield acquired
        finally:
            if acquired:
                self._release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()

    @property
    def write_held(self) -> bool:
        return self._writer


class EntryState(str, Enum):
    """
    Lifecycle of a cache entry
    缓存条目状态

    EMPTY -> FETCHING -> FRESH -> STALE -> FETCHING -> ...
    """
    EMPTY = "empty"          # Never fetched successfully
    FETCHING = "fetching"    # A caller holds or awaits the write lock
    FRESH = "fresh"          # now < expires_at
    STALE = "stale"          # Has content, now >= expires_at


class CacheEntry:
    """
    Cached upstream response for one URL
    单个 URL 的缓存条目

    `content` and `expires_at` are only touched under `lock`.
    """

    __slots__ = ("content", "expires_at", "lock")

    def __init__(self):
        self.content: bytes = b""
        self.expires_at: float = 0.0
        self.lock = ReadWriteLock()

    def snapshot(self) -> Tuple[bytes, float]:
        """Read content and expiry under the shared lock."""
        with self.lock.read_locked():
            return self.content, self.expires_at

    def peek(self) -> Optional[Tuple[bytes, float]]:
        """Like snapshot, but None instead of waiting behind a writer."""
        with self.lock.read_locked_nowait() as acquired:
            if not acquired:
                return None
            return self.content, self.expires_at

    def state(self, now: float) -> EntryState:
        return self._state_of(self.peek(), now)

    @staticmethod
    def _state_of(peeked: Optional[Tuple[bytes, float]], now: float) -> EntryState:
        if peeked is None:
            return EntryState.FETCHING
        _, expires_at = peeked
        if expires_at == 0.0:
            return EntryState.EMPTY
        if now < expires_at:
            return EntryState.FRESH
        return EntryState.STALE


class ProxyCache:
    """
    Per-URL memoizing front for UpstreamFetcher
    上游响应缓存

    Constructed once per application and injected into the proxy route.
    The URL map grows for the lifetime of the process.
    """

    def __init__(
        self,
        fetcher: Optional[UpstreamFetcher] = None,
        coalesce_misses: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize proxy cache

        Args:
            fetcher: Outbound fetcher (a default one is created if omitted)
            coalesce_misses: Re-check freshness after taking the write lock so
                callers queued behind a fetch reuse its result
            clock: Monotonic time source in seconds
        """
        self.fetcher = fetcher or UpstreamFetcher()
        self.coalesce_misses = coalesce_misses
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def _load_or_create(self, url: str) -> Tuple[CacheEntry, bool]:
        """
        Get the entry for url, inserting an empty one if absent.

        Returns:
            (entry, existed). Racing callers always receive the same entry.
        """
        entry = self._entries.get(url)
        if entry is not None:
            return entry, True
        fresh = CacheEntry()
        # dict.setdefault is atomic, so only one insert wins
        entry = self._entries.setdefault(url, fresh)
        return entry, entry is not fresh

    def get(self, url: str) -> bytes:
        """
        Get content for url, fetching from upstream on miss or expiry
        获取缓存内容，未命中或过期时从上游获取

        Raises:
            Whatever UpstreamFetcher.fetch raises. The entry keeps its
            previous content and expiry on failure.
        """
        entry, existed = self._load_or_create(url)

        if existed:
            content, expires_at = entry.snapshot()
            if self._clock() < expires_at:
                logger.debug(f"[ProxyCache] Cache hit: {url[:80]}")
                return content

        host = target_host(urlsplit(url))
        with entry.lock.write_locked():
            if self.coalesce_misses and self._clock() < entry.expires_at:
                logger.debug(f"[ProxyCache] Reused concurrent fetch: {url[:80]}")
                return entry.content

            logger.info(f"[ProxyCache] Fetching: {url[:80]}")
            content = self.fetcher.fetch(url)
            entry.content = content
            entry.expires_at = self._clock() + ttl_for_host(host).total_seconds()
            return content

    def state_of(self, url: str) -> Optional[EntryState]:
        """State of the entry for url, or None if it was never requested."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        return entry.state(self._clock())

    def stats(self) -> Dict[str, int]:
        """
        Get cache statistics
        获取缓存统计信息
        """
        now = self._clock()
        counts = {state.value: 0 for state in EntryState}
        total_bytes = 0
        # Never blocks: entries being fetched are counted without their bytes
        for entry in list(self._entries.values()):
            peeked = entry.peek()
            counts[CacheEntry._state_of(peeked, now).value] += 1
            if peeked is not None:
                total_bytes += len(peeked[0])
        return {
            "total_entries": sum(counts.values()),
            "total_size_bytes": total_bytes,
            **counts,
        }

    def close(self) -> None:
        self.fetcher.close()
