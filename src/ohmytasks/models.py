from __future__ import annotations

from typing import Literal, Optional, TypedDict, Union

Priority = Literal["top", "medium", "low"]
TaskId = Union[str, int]


# PUBLIC_INTERFACE
class TaskDraft(TypedDict):
    """
    Unsaved task produced by the transcript parser, ready to be merged into a
    task-creation form.

    Fields:
    - name: Task name ("New Task" when nothing could be extracted)
    - details: Free text, possibly empty
    - date: YYYY-MM-DD or empty
    - time: HH:MM or empty (always empty for full-day drafts)
    - isFullDay / isUrgent: Flags detected from marker words
    - tags: Always empty (not derived from speech)
    - priority: Always "medium"
    """

    name: str
    details: str
    date: str
    time: str
    isFullDay: bool
    isUrgent: bool
    tags: str
    priority: Priority


# PUBLIC_INTERFACE
class TaskRecord(TypedDict, total=False):
    """
    Canonical task shape produced by normalization.

    Upstream fields that are not listed here are carried along unchanged, so
    instances are treated as open dicts.
    """

    id: TaskId
    name: str
    title: str
    details: str
    date: str
    time: str
    isFullDay: bool
    isUrgent: bool
    urgent: bool
    completed: bool
    tags: str
    priority: Priority
    email: str
    createdAt: Optional[str]
