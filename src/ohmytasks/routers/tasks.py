from __future__ import annotations

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..auth import get_api_key_dependency, get_owner_email
from ..schemas import TaskCreate, TaskOut, TasksEnvelope, TaskUpdate
from ..tasks_client import TasksClient, get_tasks_client
from ..utils import tasks_envelope
from ..views import DEFAULT_WINDOW, UPCOMING_WINDOWS, overdue_tasks, partition_tasks, upcoming_tasks

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_api_key_dependency())],
)

TaskView = Literal["all", "active", "history", "overdue", "upcoming"]


def _get_client(client: TasksClient = Depends(get_tasks_client)) -> TasksClient:
    """
    Dependency wrapper for the tasks client to keep signatures clean.
    """
    return client


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TasksEnvelope,
    summary="List Tasks",
    description=(
        "List the owner's tasks, normalized to the canonical shape.\n\n"
        "Query parameters:\n"
        "- view: all (default), active, history, overdue or upcoming\n"
        "- window: for view=upcoming, one of today, next3days, nextWeek\n"
        "- cache: set to false to bypass the 5-minute read cache\n\n"
        "Returns an envelope with the items and where they came from (cache or network)."
    ),
    responses={
        200: {"description": "Tasks retrieved successfully"},
        400: {"description": "Invalid query parameters"},
        401: {"description": "No owner identity"},
    },
)
def list_tasks(
    view: TaskView = Query("all", description="Which tasks to return"),
    window: str = Query(DEFAULT_WINDOW, description="Upcoming window: today, next3days or nextWeek"),
    cache: bool = Query(True, description="Serve from the read cache when fresh"),
    owner: str = Depends(get_owner_email),
    client: TasksClient = Depends(_get_client),
) -> TasksEnvelope:
    """
    List tasks for the current owner.
    """
    if view == "upcoming" and window not in UPCOMING_WINDOWS:
        raise HTTPException(
            status_code=400,
            detail=f"window must be one of {', '.join(UPCOMING_WINDOWS)}",
        )

    result = client.fetch_tasks(email=owner, use_cache=cache)
    items = result.tasks
    if view == "active":
        items = partition_tasks(items)[0]
    elif view == "history":
        items = partition_tasks(items)[1]
    elif view == "overdue":
        items = overdue_tasks(items)
    elif view == "upcoming":
        items = upcoming_tasks(items, window=window, today=date.today())

    envelope = tasks_envelope(items=items, source=result.source, cached_at=result.cached_at)
    return TasksEnvelope.model_validate(envelope)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task upstream and return it normalized. Invalidates the owner's read cache.",
    responses={
        201: {"description": "Task created successfully"},
        401: {"description": "No owner identity"},
        502: {"description": "Upstream failure"},
    },
)
def create_task(
    payload: TaskCreate,
    owner: str = Depends(get_owner_email),
    client: TasksClient = Depends(_get_client),
) -> TaskOut:
    """
    Create a new task.
    """
    created = client.create_task(owner, payload.model_dump())
    return TaskOut.model_validate(created)


def _apply_update(task_id: str, payload: TaskUpdate, owner: str, client: TasksClient) -> TaskOut:
    updates = payload.model_dump(exclude_unset=True)
    updated = client.update_task(owner, task_id, updates)
    return TaskOut.model_validate(updated)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Update the given fields of a task. Invalidates the owner's read cache.",
    responses={
        200: {"description": "Task updated"},
        401: {"description": "No owner identity"},
        404: {"description": "Task not found upstream"},
    },
)
def put_task(
    task_id: str,
    payload: TaskUpdate,
    owner: str = Depends(get_owner_email),
    client: TasksClient = Depends(_get_client),
) -> TaskOut:
    """
    Partial update of a task; the upstream applies last-write-wins.
    """
    return _apply_update(task_id, payload, owner, client)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Patch Task",
    description="Alias of PUT: partially update fields of a task.",
    responses={
        200: {"description": "Task updated"},
        401: {"description": "No owner identity"},
        404: {"description": "Task not found upstream"},
    },
)
def patch_task(
    task_id: str,
    payload: TaskUpdate,
    owner: str = Depends(get_owner_email),
    client: TasksClient = Depends(_get_client),
) -> TaskOut:
    """
    Partial update of a task.
    """
    return _apply_update(task_id, payload, owner, client)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID. Invalidates the owner's read cache.",
    responses={
        204: {"description": "Task deleted"},
        401: {"description": "No owner identity"},
        404: {"description": "Task not found upstream"},
    },
)
def delete_task(
    task_id: str,
    owner: str = Depends(get_owner_email),
    client: TasksClient = Depends(_get_client),
) -> Response:
    """
    Delete a task. Returns 204 on success.
    """
    client.delete_task(owner, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
