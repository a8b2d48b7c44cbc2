from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .normalization import to_boolean

# Upcoming windows, in days starting today
UPCOMING_WINDOWS = {"today": 1, "next3days": 3, "nextWeek": 7}
DEFAULT_WINDOW = "nextWeek"

_END_OF_DAY = time(23, 59, 59)


def _parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _parse_time(value: Any) -> Optional[time]:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except ValueError:
        return None


# PUBLIC_INTERFACE
def task_due_at(task: Mapping[str, Any]) -> Optional[datetime]:
    """
    Due datetime of a task.

    Timed tasks are due at their time; full-day and untimed tasks at the end
    of their day. Tasks without a valid date have no due datetime.
    """
    day = _parse_date(task.get("date"))
    if day is None:
        return None
    at = None if to_boolean(task.get("isFullDay")) else _parse_time(task.get("time"))
    return datetime.combine(day, at or _END_OF_DAY)


# PUBLIC_INTERFACE
def partition_tasks(tasks: Iterable[Mapping[str, Any]]) -> Tuple[List[Mapping[str, Any]], List[Mapping[str, Any]]]:
    """Split tasks into (active, history) by their completed flag, keeping order."""
    active: List[Mapping[str, Any]] = []
    history: List[Mapping[str, Any]] = []
    for task in tasks:
        (history if to_boolean(task.get("completed")) else active).append(task)
    return active, history


def is_overdue(task: Mapping[str, Any], now: Optional[datetime] = None) -> bool:
    if to_boolean(task.get("completed")):
        return False
    due = task_due_at(task)
    return due is not None and due < (now or datetime.now())


def overdue_tasks(tasks: Iterable[Mapping[str, Any]], now: Optional[datetime] = None) -> List[Mapping[str, Any]]:
    now = now or datetime.now()
    return [t for t in tasks if is_overdue(t, now)]


# PUBLIC_INTERFACE
def upcoming_tasks(
    tasks: Iterable[Mapping[str, Any]],
    window: str = DEFAULT_WINDOW,
    today: Optional[date] = None,
) -> List[Mapping[str, Any]]:
    """
    Active tasks dated within ``window`` (today, next3days, nextWeek),
    sorted by due datetime.

    Raises:
        ValueError: for an unknown window name.
    """
    if window not in UPCOMING_WINDOWS:
        raise ValueError(f"window must be one of {', '.join(UPCOMING_WINDOWS)}")
    start = today or date.today()
    end = start + timedelta(days=UPCOMING_WINDOWS[window])

    selected = []
    for task in tasks:
        if to_boolean(task.get("completed")):
            continue
        day = _parse_date(task.get("date"))
        if day is not None and start <= day < end:
            selected.append(task)
    return sorted(selected, key=lambda t: task_due_at(t) or datetime.max)


def task_tags(task: Mapping[str, Any]) -> List[str]:
    """Comma-separated tags as a trimmed list."""
    tags = task.get("tags") or ""
    if not isinstance(tags, str):
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]
