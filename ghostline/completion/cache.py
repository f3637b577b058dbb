#!/usr/bin/env python3
"""
Ghostline Completion Cache
TTL-bounded memo of merged provider results
"""

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from ..logger import logger
from .models import CompletionContext, CompletionResult

log = logger.get_logger("completion.cache")

DEFAULT_TTL_SECONDS = 300
DEFAULT_MAX_ENTRIES = 100


class SystemClock:
    """Monotonic seconds"""

    def now(self) -> float:
        return time.monotonic()


def hash_used(used) -> str:
    return hashlib.sha1("\x00".join(sorted(used)).encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CacheKey:
    command: str
    argument: str
    element_type: str
    provider: str
    partial: str
    used_hash: str

    @classmethod
    def for_context(cls, ctx: CompletionContext) -> "CacheKey":
        return cls(
            command=ctx.command_name.lower(),
            argument=ctx.argument_name.lower(),
            element_type=ctx.element_type.value if ctx.element_type else "",
            provider=ctx.completion.identity,
            partial=ctx.partial,
            used_hash=hash_used(ctx.used),
        )


@dataclass(frozen=True)
class CacheEntry:
    result: CompletionResult
    created_at: float
    expires_at: float


class CompletionCache:
    """
    Thread-safe completion cache.

    Entries expire lazily: an expired entry is dropped when it is next read.
    At capacity the entry with the oldest creation time is evicted.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, default_ttl: float = DEFAULT_TTL_SECONDS, clock=None):
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self.clock = clock or SystemClock()
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[CompletionResult]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self.clock.now() >= entry.expires_at:
                del self._entries[key]
                log.debug(f"Cache entry expired for {key.command!r}/{key.element_type}")
                return None
            return entry.result

    def set(self, key: CacheKey, result: CompletionResult, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return
        now = self.clock.now()
        with self._lock:
            if key not in self._entries and self._entries and len(self._entries) >= self.max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k].created_at)
                del self._entries[oldest]
                log.debug(f"Cache full, evicted entry for {oldest.command!r}")
            self._entries[key] = CacheEntry(result, now, now + ttl)

    def invalidate(self, key: CacheKey) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_for_command(self, command: str) -> int:
        """Drop every entry for a command path, case-insensitively"""
        name = command.lower()
        with self._lock:
            stale = [key for key in self._entries if key.command == name]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __contains__(self, key):
        """Live entry check; unlike get, an expired entry is left in place"""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self.clock.now() < entry.expires_at
