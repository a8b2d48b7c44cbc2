from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Mapping, Optional

from .models import Priority, TaskRecord

TEMP_ID_PREFIX = "temp-"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n", "off", ""})

_PRIORITY_ALIASES: Dict[str, Priority] = {
    "top": "top",
    "high": "top",
    "medium": "medium",
    "low": "low",
}

_BOOLEAN_UPSTREAM_FIELDS = ("isFullDay", "urgent", "completed")


# PUBLIC_INTERFACE
def to_boolean(value: Any) -> bool:
    """
    Coerce a boolean-like upstream value.

    - bool: returned as-is
    - int/float: True only when equal to 1
    - str: "1"/"true"/"yes"/"y"/"on" -> True, "0"/"false"/"no"/"n"/"off"/"" -> False
      (trimmed, case-insensitive)
    - anything else, including unrecognized strings: False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
    return False


# PUBLIC_INTERFACE
def normalize_priority(value: Any) -> Priority:
    """Map a priority to "top", "medium" or "low"; unknown values become "medium"."""
    if isinstance(value, str):
        return _PRIORITY_ALIASES.get(value.strip().lower(), "medium")
    return "medium"


# PUBLIC_INTERFACE
def temporary_task_id() -> str:
    """Unstable client-side id for tasks the upstream returned without one."""
    return f"{TEMP_ID_PREFIX}{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"


def is_temporary_id(task_id: Any) -> bool:
    return isinstance(task_id, str) and task_id.startswith(TEMP_ID_PREFIX)


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def _tags_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v).strip() for v in value if str(v).strip())
    return str(value)


# PUBLIC_INTERFACE
def normalize_task(raw: Any) -> TaskRecord:
    """
    Map an upstream task-like object into the canonical task shape.

    Unknown fields are kept. Anything that is not a mapping is treated as an
    empty task. Applying this function to its own output returns an equal dict.
    """
    source: Mapping[str, Any] = raw if isinstance(raw, Mapping) else {}

    name = _text(_first(source, "name", "title", default=""))
    title = _text(_first(source, "title", "name", default=name))
    is_full_day = to_boolean(_first(source, "isFullDay", "is_full_day"))
    is_urgent = to_boolean(_first(source, "isUrgent", "urgent", "is_urgent"))

    task_id = _first(source, "id", "task_id", "_id")
    if task_id is None:
        task_id = temporary_task_id()
    elif isinstance(task_id, bool) or not isinstance(task_id, (int, str)):
        task_id = str(task_id)

    task: Dict[str, Any] = dict(source)
    task.update(
        {
            "id": task_id,
            "name": name,
            "title": title,
            "details": _text(_first(source, "details", "detail", default="")),
            "date": _text(_first(source, "date", default="")),
            "time": "" if is_full_day else _text(_first(source, "time", default="")),
            "isFullDay": is_full_day,
            "isUrgent": is_urgent,
            "urgent": is_urgent,
            "completed": to_boolean(_first(source, "completed", "isCompleted", "is_completed")),
            "tags": _tags_string(source.get("tags")),
            "priority": normalize_priority(source.get("priority")),
            "email": _text(_first(source, "email", default="")),
            "createdAt": _first(source, "createdAt", "created_at"),
        }
    )
    return task  # type: ignore[return-value]


# PUBLIC_INTERFACE
def to_upstream_create(task: Mapping[str, Any], email: str) -> Dict[str, Any]:
    """
    Build the body the upstream expects for a create call.

    Booleans travel as 0/1 and the task name is sent as ``title``.
    """
    name = _first(task, "name", "title", default="")
    return {
        "email": email,
        "title": name,
        "details": _first(task, "details", "detail", default=""),
        "date": _first(task, "date", default=""),
        "time": _first(task, "time", default=""),
        "isFullDay": 1 if to_boolean(_first(task, "isFullDay", "is_full_day")) else 0,
        "urgent": 1 if to_boolean(_first(task, "isUrgent", "urgent", "is_urgent")) else 0,
        "completed": 1 if to_boolean(task.get("completed")) else 0,
        "tags": _tags_string(task.get("tags")),
        "priority": normalize_priority(task.get("priority")),
    }


# PUBLIC_INTERFACE
def to_upstream_update(updates: Mapping[str, Any], email: str) -> Dict[str, Any]:
    """
    Build the body for a partial update: only the given fields are sent,
    plus the owner email.
    """
    body: Dict[str, Any] = dict(updates)
    if "name" in body and "title" not in body:
        body["title"] = body["name"]
    if "isUrgent" in body and "urgent" not in body:
        body["urgent"] = body.pop("isUrgent")
    for key in _BOOLEAN_UPSTREAM_FIELDS:
        if key in body:
            body[key] = 1 if to_boolean(body[key]) else 0
    if "priority" in body:
        body["priority"] = normalize_priority(body["priority"])
    if "tags" in body:
        body["tags"] = _tags_string(body["tags"])
    body["email"] = email
    return body


def fallback_task(fields: Mapping[str, Any], email: str, task_id: Optional[Any] = None) -> TaskRecord:
    """Normalized task built from what the caller sent, for empty upstream replies."""
    merged: Dict[str, Any] = dict(fields)
    if task_id is not None:
        merged["id"] = task_id
    merged["email"] = email
    return normalize_task(merged)
