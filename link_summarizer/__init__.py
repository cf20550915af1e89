"""Top-level package exports for the link summarizer."""

from .cache import MemoryCacheStore, SqliteCacheStore, memoize
from .classifier import classify
from .dispatcher import Summarizer
from .relay import Relay
from .schemas import Chapter, HostKind, Reply, SummarizeResult
from .settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "Chapter",
    "HostKind",
    "MemoryCacheStore",
    "Relay",
    "Reply",
    "SqliteCacheStore",
    "SummarizeResult",
    "Summarizer",
    "classify",
    "get_settings",
    "memoize",
]
