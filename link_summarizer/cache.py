"""Cache stores and the memoization helper shared by every expensive step.

Keys are ``"{namespace}-{sha256(raw)}"``. Values must be JSON-serializable.
Entries stored with ``ttl=None`` never expire.
"""

from collections.abc import Callable
from datetime import timedelta
import hashlib
import json
import logging
from pathlib import Path
import sqlite3
import time
from typing import Any, Protocol, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

AUDIO_NAMESPACE = "audio"
SCRAPE_NAMESPACE = "scrape"
WEBPAGE_NAMESPACE = "webpage"
VIDEO_NAMESPACE = "video"

SCHEMA = """
PRAGMA journal_mode=WAL;

CREATE TABLE IF NOT EXISTS cache (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,
  expires_at REAL
);
"""


class CacheStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None: ...


def cache_key(namespace: str, raw: str) -> str:
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
    return f"{namespace}-{digest}"


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, dict)) and not value)


def _expires_at(ttl: timedelta | None, now: float) -> float | None:
    return None if ttl is None else now + ttl.total_seconds()


class MemoryCacheStore:
    """In-process store. ``clock`` returns epoch seconds and can be swapped in tests."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return value

    def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        self._entries[key] = (value, _expires_at(ttl, self._clock()))

    def __len__(self) -> int:
        return len(self._entries)


class SqliteCacheStore:
    """Persistent store so audio artifacts outlive a restart."""

    def __init__(self, db_path: str, clock: Callable[[], float] = time.time):
        self.db_path = db_path
        self._clock = clock
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        con = self.connect()
        try:
            con.executescript(SCHEMA)
            con.commit()
        finally:
            con.close()

    def connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def get(self, key: str) -> Any | None:
        con = self.connect()
        try:
            row = con.execute("SELECT value, expires_at FROM cache WHERE key=?", (key,)).fetchone()
            if not row:
                return None
            value, expires_at = row
            if expires_at is not None and expires_at <= self._clock():
                con.execute("DELETE FROM cache WHERE key=?", (key,))
                con.commit()
                return None
            return json.loads(value)
        finally:
            con.close()

    def put(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        con = self.connect()
        try:
            con.execute(
                "INSERT OR REPLACE INTO cache(key, value, expires_at) VALUES(?,?,?)",
                (key, json.dumps(value, ensure_ascii=False), _expires_at(ttl, self._clock())),
            )
            con.commit()
        finally:
            con.close()


def memoize(
    store: CacheStore,
    namespace: str,
    raw: str,
    ttl: timedelta | None,
    compute: Callable[[], V],
) -> V:
    """Return the cached value for ``(namespace, raw)`` or compute and store it.

    Empty results are returned but never stored. There is no locking, so two
    concurrent misses on one key both compute and the last write wins.
    """
    key = cache_key(namespace, raw)

    cached = store.get(key)
    if not _is_empty(cached):
        logger.debug("Cache hit for %s", key)
        return cached

    value = compute()
    if not _is_empty(value):
        store.put(key, value, ttl)
    return value


def create_cache_store(backend: str, path: str) -> CacheStore:
    if backend == "memory":
        return MemoryCacheStore()
    if backend == "sqlite":
        return SqliteCacheStore(path)
    raise ValueError(f"Unknown cache backend: {backend}")
