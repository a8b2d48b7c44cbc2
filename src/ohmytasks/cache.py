from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .storage import CacheStorage

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "ohmytasks"
CACHE_VERSION = "v1"
DEFAULT_TTL_SECONDS = 5 * 60
ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class CacheEntry:
    """A cached task list and the epoch time (seconds) it was stored at."""

    timestamp: float
    tasks: List[Any]

    def age(self, now: float) -> float:
        return max(now - self.timestamp, 0.0)


def cache_key(identity: Optional[str]) -> str:
    return f"{CACHE_NAMESPACE}:{CACHE_VERSION}:tasks:{identity or ANONYMOUS}"


# PUBLIC_INTERFACE
class TaskCache:
    """
    Short-lived per-user cache of normalized task lists.

    The cache is advisory: every storage failure is logged and treated as a
    miss (reads) or ignored (writes), so callers simply go to the upstream.
    """

    def __init__(
        self,
        storage: CacheStorage,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def backend(self) -> str:
        return self._storage.name

    def now(self) -> float:
        return self._clock()

    def get(self, identity: Optional[str]) -> Optional[CacheEntry]:
        """Return the fresh entry for ``identity`` or None."""
        key = cache_key(identity)
        try:
            raw = self._storage.get(key)
        except Exception as exc:  # noqa: BLE001 - any backend failure is a miss
            logger.debug("Cache read failed for %s: %s", key, exc)
            return None
        if not raw:
            return None

        try:
            parsed = json.loads(raw)
            entry = CacheEntry(timestamp=float(parsed["timestamp"]), tasks=parsed["tasks"])
            if not isinstance(entry.tasks, list):
                raise ValueError("tasks is not a list")
        except (ValueError, TypeError, KeyError) as exc:
            logger.debug("Discarding malformed cache entry %s: %s", key, exc)
            self._remove(key)
            return None

        if entry.age(self.now()) > self._ttl:
            self._remove(key)
            return None
        return entry

    def set(self, identity: Optional[str], tasks: List[Any]) -> None:
        key = cache_key(identity)
        try:
            value = json.dumps({"timestamp": self.now(), "tasks": tasks})
            self._storage.set(key, value)
        except Exception as exc:  # noqa: BLE001 - cache writes are best effort
            logger.debug("Cache write failed for %s: %s", key, exc)

    def invalidate(self, identity: Optional[str]) -> None:
        self._remove(cache_key(identity))

    def _remove(self, key: str) -> None:
        try:
            self._storage.remove(key)
        except Exception as exc:  # noqa: BLE001 - cache writes are best effort
            logger.debug("Cache removal failed for %s: %s", key, exc)
