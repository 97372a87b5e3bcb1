"""
Cache Service
In-process key/value cache with per-entry expiry
"""

import logging
import time
from typing import Any, Callable, Optional, Tuple

from cachetools import TLRUCache

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600
MAX_ENTRIES = 10000


def _expires_at(key: str, entry: Tuple[Any, float], now: float) -> float:
    return now + entry[1]


class MemoryCache:
    """Expiring cache; stale entries are purged on every write"""

    def __init__(self, clock: Callable[[], float] = time.monotonic, maxsize: int = MAX_ENTRIES):
        self._entries = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=clock)

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache MISS: {key}")
            return default
        return entry[0]

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        seconds = DEFAULT_TTL_SECONDS if ttl is None else ttl
        self._entries[key] = (value, seconds)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)


# Shared instance
cache = MemoryCache()
