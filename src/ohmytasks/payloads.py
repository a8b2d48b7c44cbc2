"""
Task-list extraction from upstream responses.

The upstream API is inconsistent about where it puts tasks: a bare list, a
list wrapped under one of several keys (possibly nested under ``payload``),
a JSON string, or an object map of task records keyed by id. Extraction is a
small ordered list of shape recognizers; the first one returning a non-empty
list wins and anything unrecognisable gives an empty list.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

MAX_DEPTH = 6

WRAPPER_KEYS: Tuple[str, ...] = ("tasks", "data", "items", "results", "records", "rows", "payload")
TASK_MARKER_KEYS: Tuple[str, ...] = ("id", "title", "name", "task_id")

CREATE_RESPONSE_KEYS: Tuple[str, ...] = ("task", "createdTask", "data")
UPDATE_RESPONSE_KEYS: Tuple[str, ...] = ("task", "updatedTask", "data")

Recognizer = Callable[[Any, int], Optional[List[Any]]]


def _looks_like_task(value: Any) -> bool:
    return isinstance(value, Mapping) and any(key in value for key in TASK_MARKER_KEYS)


def _from_list(payload: Any, depth: int) -> Optional[List[Any]]:
    if isinstance(payload, list):
        return payload
    return None


def _from_json_text(payload: Any, depth: int) -> Optional[List[Any]]:
    if not isinstance(payload, (str, bytes)):
        return None
    try:
        decoded = json.loads(payload)
    except ValueError:
        return None
    return _extract(decoded, depth + 1)


def _from_wrapper(payload: Any, depth: int) -> Optional[List[Any]]:
    if not isinstance(payload, Mapping):
        return None
    for key in WRAPPER_KEYS:
        if key in payload:
            found = _extract(payload[key], depth + 1)
            if found:
                return found
    return None


def _from_record_map(payload: Any, depth: int) -> Optional[List[Any]]:
    if not isinstance(payload, Mapping):
        return None
    objects = [v for v in payload.values() if isinstance(v, (Mapping, list)) and v]
    if not objects or any(isinstance(v, list) for v in objects):
        return None
    if any(_looks_like_task(v) for v in objects):
        return list(objects)
    return None


def _from_nested(payload: Any, depth: int) -> Optional[List[Any]]:
    if not isinstance(payload, Mapping):
        return None
    for value in payload.values():
        found = _extract(value, depth + 1)
        if found:
            return found
    return None


RECOGNIZERS: Sequence[Recognizer] = (
    _from_list,
    _from_json_text,
    _from_wrapper,
    _from_record_map,
    _from_nested,
)


def _extract(payload: Any, depth: int) -> List[Any]:
    if payload is None or depth > MAX_DEPTH:
        return []
    for recognize in RECOGNIZERS:
        found = recognize(payload, depth)
        if found:
            return found
    return []


# PUBLIC_INTERFACE
def extract_tasks(payload: Any) -> List[Any]:
    """
    Return the first list of task-like records found in ``payload``.

    Never raises; returns [] when nothing recognisable is found.
    """
    try:
        return _extract(payload, 0)
    except RecursionError:
        logger.warning("Task payload too deeply nested; treating it as empty")
        return []


# PUBLIC_INTERFACE
def extract_single_task(payload: Any, keys: Sequence[str] = CREATE_RESPONSE_KEYS) -> Optional[Any]:
    """
    Pick the task out of a create/update response.

    Tries the first list element, then ``keys`` in order, then the payload
    itself. Returns None for empty or non-object responses.
    """
    if isinstance(payload, list):
        return payload[0] if payload else None
    if not isinstance(payload, Mapping) or not payload:
        return None
    for key in keys:
        value = payload.get(key)
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, Mapping):
            return value
    if _looks_like_task(payload):
        return payload
    return None
