from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import Dict, Optional

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class CacheStorage(ABC):
    """Minimal key/value contract for cache storage backends."""

    name: str = "abstract"

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Removing a missing key is not an error."""


class InMemoryStorage(CacheStorage):
    """
    Thread-safe in-memory storage suitable for testing and default runtime.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)


class NullStorage(CacheStorage):
    """Disabled storage: nothing is kept, every read misses."""

    name = "none"

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        return None

    def remove(self, key: str) -> None:
        return None


# PUBLIC_INTERFACE
def get_cache_storage(settings: Optional[Settings] = None) -> CacheStorage:
    """
    Factory to return the configured cache storage based on settings.
    - memory: InMemoryStorage
    - sqlite: SQLiteStorage (falls back to memory if the file cannot be opened)
    - none: NullStorage
    """
    settings = settings or get_settings()
    if settings.cache_backend == "none":
        return NullStorage()
    if settings.cache_backend == "sqlite":
        from .db import SQLiteStorage

        try:
            return SQLiteStorage(settings.cache_db_path)
        except (OSError, SQLiteStorage.Error) as exc:
            logger.warning("SQLite cache unavailable at %s (%s); using memory", settings.cache_db_path, exc)
            return InMemoryStorage()
    return InMemoryStorage()
