from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Literal, Mapping, Optional

import requests

from .cache import TaskCache
from .models import TaskId, TaskRecord
from .normalization import fallback_task, normalize_task, to_upstream_create, to_upstream_update
from .payloads import CREATE_RESPONSE_KEYS, UPDATE_RESPONSE_KEYS, extract_single_task, extract_tasks
from .settings import get_settings
from .storage import get_cache_storage
from .upstream import UpstreamClient, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """
    Result of a task-list read.

    - tasks: normalized tasks
    - source: 'cache' or 'network'
    - cached_at: epoch seconds the cached list was stored at (cache hits only)
    - age: seconds since the cached list was stored (cache hits only)
    - payload: the raw upstream body (network reads only)
    """

    tasks: List[TaskRecord]
    source: Literal["cache", "network"]
    cached_at: Optional[float] = None
    age: Optional[float] = None
    payload: Any = field(default=None, repr=False)


def _require(value: Any, message: str) -> None:
    if value is None or value == "":
        raise ValueError(message)


def _upstream_record(record: Mapping[str, Any], email: str, task_id: Optional[TaskId] = None) -> TaskRecord:
    """Normalize the record the upstream returned; only missing owner/id are filled in."""
    filled: Dict[str, Any] = dict(record)
    if filled.get("email") in (None, ""):
        filled["email"] = email
    if task_id is not None and all(filled.get(k) is None for k in ("id", "task_id", "_id")):
        filled["id"] = task_id
    return normalize_task(filled)


def _reject_unsuccessful(payload: Any, action: str) -> None:
    if isinstance(payload, Mapping) and payload.get("success") is False:
        error = payload.get("error") or f"Failed to {action} task"
        raise UpstreamError(str(error), body=payload)


# PUBLIC_INTERFACE
class TasksClient:
    """
    Task operations against the upstream API with a per-user read cache.

    Reads go through the cache when enabled; every successful mutation
    invalidates the owner's cache entry before returning.
    """

    def __init__(self, upstream: UpstreamClient, cache: TaskCache) -> None:
        self._upstream = upstream
        self._cache = cache

    @property
    def cache(self) -> TaskCache:
        return self._cache

    @property
    def upstream(self) -> UpstreamClient:
        return self._upstream

    def fetch_tasks(self, email: Optional[str] = None, use_cache: bool = True) -> FetchResult:
        """Return the owner's tasks from the cache when fresh, otherwise from the upstream."""
        if use_cache:
            cached = self._cache.get(email)
            if cached is not None:
                return FetchResult(
                    tasks=cached.tasks,
                    source="cache",
                    cached_at=cached.timestamp,
                    age=cached.age(self._cache.now()),
                )

        payload = self._upstream.get(params={"email": email} if email else None)
        tasks = [normalize_task(raw) for raw in extract_tasks(payload)]
        logger.debug("Fetched %d tasks from upstream", len(tasks))

        if use_cache:
            self._cache.set(email, tasks)
        return FetchResult(tasks=tasks, source="network", payload=payload)

    def create_task(self, email: str, task: Mapping[str, Any]) -> TaskRecord:
        _require(email, "Email is required to create a task")
        payload = self._upstream.post(json_body=to_upstream_create(task, email))
        _reject_unsuccessful(payload, "create")
        self._cache.invalidate(email)

        created = extract_single_task(payload, CREATE_RESPONSE_KEYS)
        if isinstance(created, Mapping):
            return _upstream_record(created, email)
        return fallback_task(task, email)

    def update_task(self, email: str, task_id: TaskId, updates: Mapping[str, Any]) -> TaskRecord:
        _require(email, "Email is required to update a task")
        _require(task_id, "Task id is required")
        payload = self._upstream.put(
            params={"id": task_id, "email": email},
            json_body=to_upstream_update(updates, email),
        )
        _reject_unsuccessful(payload, "update")
        self._cache.invalidate(email)

        updated = extract_single_task(payload, UPDATE_RESPONSE_KEYS)
        if isinstance(updated, Mapping):
            return _upstream_record(updated, email, task_id=task_id)
        return fallback_task(updates, email, task_id=task_id)

    def delete_task(self, email: str, task_id: TaskId) -> bool:
        _require(email, "Email is required to delete a task")
        _require(task_id, "Task id is required")
        self._upstream.delete(params={"id": task_id, "email": email})
        self._cache.invalidate(email)
        return True


@lru_cache(maxsize=1)
def get_upstream_session() -> requests.Session:
    """Process-wide HTTP session so upstream connections are pooled across requests."""
    return requests.Session()


@lru_cache(maxsize=1)
def get_task_cache() -> TaskCache:
    """Process-wide task cache built from settings."""
    settings = get_settings()
    return TaskCache(get_cache_storage(settings), ttl_seconds=settings.cache_ttl_seconds)


# PUBLIC_INTERFACE
def get_tasks_client() -> TasksClient:
    """
    Factory to return a TasksClient for the configured upstream, sharing the
    process-wide cache and HTTP session.

    Raises:
        UpstreamNotConfigured: when TASKS_API_ENDPOINT is not set.
    """
    settings = get_settings()
    upstream = UpstreamClient(
        settings.tasks_api_endpoint,
        api_key=settings.tasks_api_key,
        timeout=settings.tasks_api_timeout,
        session=get_upstream_session(),
    )
    return TasksClient(upstream, get_task_cache())
