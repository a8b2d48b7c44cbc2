import json

from ohmytasks.cache import TaskCache, cache_key
from ohmytasks.db import SQLiteStorage
from ohmytasks.settings import get_settings
from ohmytasks.storage import CacheStorage, InMemoryStorage, NullStorage, get_cache_storage

TASKS = [{"id": 1, "name": "One"}]


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now


class BrokenStorage(CacheStorage):
    name = "broken"

    def get(self, key):
        raise RuntimeError("storage offline")

    def set(self, key, value):
        raise RuntimeError("storage offline")

    def remove(self, key):
        raise RuntimeError("storage offline")


class TestCacheKey:
    def test_namespaced_per_user(self):
        assert cache_key("a@example.com") == "ohmytasks:v1:tasks:a@example.com"
        assert cache_key(None) == "ohmytasks:v1:tasks:anonymous"


class TestTaskCache:
    def test_round_trip_within_ttl(self):
        clock = FakeClock()
        cache = TaskCache(InMemoryStorage(), ttl_seconds=300, clock=clock)
        cache.set("a@example.com", TASKS)
        clock.now += 299
        entry = cache.get("a@example.com")
        assert entry is not None
        assert entry.tasks == TASKS
        assert entry.timestamp == 1_000.0
        assert entry.age(clock.now) == 299

    def test_expired_entry_is_removed(self):
        clock = FakeClock()
        storage = InMemoryStorage()
        cache = TaskCache(storage, ttl_seconds=300, clock=clock)
        cache.set("a@example.com", TASKS)
        clock.now += 301
        assert cache.get("a@example.com") is None
        assert storage.get(cache_key("a@example.com")) is None

    def test_users_are_isolated(self):
        cache = TaskCache(InMemoryStorage(), clock=FakeClock())
        cache.set("a@example.com", TASKS)
        assert cache.get("b@example.com") is None

    def test_invalidate(self):
        cache = TaskCache(InMemoryStorage(), clock=FakeClock())
        cache.set("a@example.com", TASKS)
        cache.invalidate("a@example.com")
        assert cache.get("a@example.com") is None

    def test_malformed_entry_is_a_miss(self):
        storage = InMemoryStorage()
        storage.set(cache_key("a@example.com"), "{not json")
        cache = TaskCache(storage, clock=FakeClock())
        assert cache.get("a@example.com") is None
        assert storage.get(cache_key("a@example.com")) is None

    def test_entry_without_list_is_a_miss(self):
        storage = InMemoryStorage()
        storage.set(cache_key("a@example.com"), json.dumps({"timestamp": 1_000.0, "tasks": "nope"}))
        assert TaskCache(storage, clock=FakeClock()).get("a@example.com") is None

    def test_broken_storage_degrades_to_misses(self):
        cache = TaskCache(BrokenStorage(), clock=FakeClock())
        cache.set("a@example.com", TASKS)
        cache.invalidate("a@example.com")
        assert cache.get("a@example.com") is None

    def test_null_storage_never_hits(self):
        cache = TaskCache(NullStorage(), clock=FakeClock())
        cache.set("a@example.com", TASKS)
        assert cache.get("a@example.com") is None
        assert cache.backend == "none"


class TestSQLiteStorage:
    def test_set_get_remove(self, tmp_path):
        storage = SQLiteStorage(str(tmp_path / "cache.db"))
        storage.set("k", "v1")
        storage.set("k", "v2")
        assert storage.get("k") == "v2"
        storage.remove("k")
        assert storage.get("k") is None
        storage.remove("missing")

    def test_survives_reopen(self, tmp_path):
        path = str(tmp_path / "nested" / "cache.db")
        TaskCache(SQLiteStorage(path), clock=FakeClock()).set("a@example.com", TASKS)
        entry = TaskCache(SQLiteStorage(path), clock=FakeClock()).get("a@example.com")
        assert entry is not None and entry.tasks == TASKS


class TestStorageFactory:
    def test_default_is_memory(self, monkeypatch):
        monkeypatch.delenv("CACHE_BACKEND", raising=False)
        assert get_cache_storage(get_settings()).name == "memory"

    def test_none(self, monkeypatch):
        monkeypatch.setenv("CACHE_BACKEND", "none")
        assert isinstance(get_cache_storage(get_settings()), NullStorage)

    def test_sqlite(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CACHE_BACKEND", "sqlite")
        monkeypatch.setenv("CACHE_DB_PATH", str(tmp_path / "cache.db"))
        assert get_cache_storage(get_settings()).name == "sqlite"

    def test_unknown_backend_falls_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("CACHE_BACKEND", "redis")
        assert get_cache_storage(get_settings()).name == "memory"
