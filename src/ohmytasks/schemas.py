from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .models import Priority
from .normalization import normalize_priority

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_date(value: Optional[str]) -> str:
    """
    Internal helper to validate a task date.
    - None or blank means "no date" and becomes ''.
    - Otherwise the value must be a real calendar date written YYYY-MM-DD.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("date must be a string")
    s = value.strip()
    if not s:
        return ""
    if not _DATE_RE.match(s):
        raise ValueError("Invalid date format. Use YYYY-MM-DD (e.g., '2025-03-18').")
    date.fromisoformat(s)
    return s


def _validate_time(value: Optional[str]) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("time must be a string")
    s = value.strip()
    if not s:
        return ""
    if not _TIME_RE.match(s):
        raise ValueError("Invalid time format. Use 24-hour HH:MM (e.g., '18:30').")
    return s


def _validate_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    s = value.strip()
    if not (1 <= len(s) <= 200):
        raise ValueError("name length must be between 1 and 200 characters")
    return s


def _reject_null(value: Any) -> Any:
    # Defaults are not validated, so this only sees values the client sent
    if value is None:
        raise ValueError("must not be null; omit the field to leave it unchanged")
    return value


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task. ``title`` is accepted as an alias of
    ``name``. Unknown fields are accepted but not sent to the upstream.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "name": "Buy groceries",
                "details": "Milk, eggs, bread",
                "date": "2025-02-01",
                "time": "18:00",
                "isFullDay": False,
                "isUrgent": True,
                "tags": "home, errands",
                "priority": "top",
            }
        },
    )

    name: str = Field(
        ...,
        validation_alias=AliasChoices("name", "title"),
        description="Short name for the task",
    )
    details: str = Field(default="", description="Free-text details")
    date: str = Field(default="", description="Due date as YYYY-MM-DD, empty for none")
    time: str = Field(default="", description="Due time as HH:MM, empty for none; ignored for full-day tasks")
    isFullDay: bool = Field(default=False, description="Task spans the whole day")
    isUrgent: bool = Field(default=False, description="Urgency flag")
    completed: bool = Field(default=False, description="Completion status flag")
    tags: str = Field(default="", description="Comma-separated tags")
    priority: Priority = Field(default="medium", description="top, medium or low")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _validate_name(v)  # type: ignore[return-value]

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v: Optional[str]) -> str:
        return _validate_date(v)

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v: Optional[str]) -> str:
        return _validate_time(v)

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, v: Any) -> Priority:
        return normalize_priority(v)


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.
    All fields are optional; only provided fields will be sent upstream.
    An explicit null is rejected: send "" to clear a text field.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "completed": True,
                "priority": "low",
            }
        },
    )

    name: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("name", "title"),
        description="Short name for the task",
    )
    details: Optional[str] = Field(default=None, description="Free-text details")
    date: Optional[str] = Field(default=None, description="Due date as YYYY-MM-DD, empty to clear")
    time: Optional[str] = Field(default=None, description="Due time as HH:MM, empty to clear")
    isFullDay: Optional[bool] = Field(default=None, description="Task spans the whole day")
    isUrgent: Optional[bool] = Field(default=None, description="Urgency flag")
    completed: Optional[bool] = Field(default=None, description="Completion status flag")
    tags: Optional[str] = Field(default=None, description="Comma-separated tags")
    priority: Optional[Priority] = Field(default=None, description="top, medium or low")

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        If name is provided, strip whitespace and enforce 1..200 length.
        """
        return _validate_name(v)  # type: ignore[return-value]

    @field_validator("date", mode="before")
    @classmethod
    def check_date(cls, v: Any) -> str:
        return _validate_date(_reject_null(v))

    @field_validator("time", mode="before")
    @classmethod
    def check_time(cls, v: Any) -> str:
        return _validate_time(_reject_null(v))

    @field_validator("priority", mode="before")
    @classmethod
    def check_priority(cls, v: Any) -> Priority:
        return normalize_priority(_reject_null(v))


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Canonical task returned by the API. Upstream-specific fields are passed
    through as extra keys.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": 42,
                "name": "Buy groceries",
                "title": "Buy groceries",
                "details": "Milk, eggs, bread",
                "date": "2025-02-01",
                "time": "18:00",
                "isFullDay": False,
                "isUrgent": True,
                "urgent": True,
                "completed": False,
                "tags": "home, errands",
                "priority": "top",
                "email": "someone@example.com",
                "createdAt": "2025-01-25 10:15:30",
            }
        },
    )

    id: Union[int, str] = Field(..., description="Upstream identifier, or a temporary 'temp-...' id")
    name: str = Field(..., description="Task name")
    title: str = Field(..., description="Same value as name")
    details: str = Field(default="", description="Free-text details")
    date: str = Field(default="", description="YYYY-MM-DD or empty")
    time: str = Field(default="", description="HH:MM or empty")
    isFullDay: bool = Field(default=False, description="Task spans the whole day")
    isUrgent: bool = Field(default=False, description="Urgency flag")
    urgent: bool = Field(default=False, description="Same value as isUrgent")
    completed: bool = Field(default=False, description="Completion status flag")
    tags: str = Field(default="", description="Comma-separated tags")
    priority: Priority = Field(default="medium", description="top, medium or low")
    email: str = Field(default="", description="Owner email")
    createdAt: Optional[Any] = Field(default=None, description="Creation timestamp as sent by the upstream")


# PUBLIC_INTERFACE
class TasksEnvelope(BaseModel):
    """
    Envelope for task list responses.
    """

    items: List[TaskOut] = Field(..., description="Tasks in the requested view")
    total: int = Field(..., description="Number of tasks returned")
    source: str = Field(..., description="'cache' or 'network'")
    cached_at: Optional[str] = Field(default=None, description="When the cached list was stored (cache hits)")


# PUBLIC_INTERFACE
class VoiceParseRequest(BaseModel):
    """
    Schema for parsing a speech transcript into a task draft.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"transcript": "Acheter du lait demain à 18h urgent", "language": "fr-FR"}
        }
    )

    transcript: str = Field(..., description="Final speech-recognition text", min_length=1, max_length=2000)
    language: Optional[str] = Field(default=None, description="Speech language tag, e.g. 'en' or 'fr-FR'")

    @field_validator("transcript")
    @classmethod
    def validate_transcript(cls, v: str) -> str:
        s = v.strip()
        if not s:
            raise ValueError("transcript must not be blank")
        return s


# PUBLIC_INTERFACE
class TaskDraftOut(BaseModel):
    """
    Task draft parsed from a transcript, ready to prefill a creation form.
    """

    name: str
    details: str
    date: str
    time: str
    isFullDay: bool
    isUrgent: bool
    tags: str
    priority: Priority
