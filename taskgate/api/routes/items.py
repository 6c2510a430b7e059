from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status

from taskgate.core.rate_limit import enforce_rate_limit
from taskgate.schemas.task import (
    TaskCreateRequest,
    TaskDeletedResponse,
    TaskDoneResponse,
    TaskResponse,
)
from taskgate.services.task_registry import TaskRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Items"])


def get_task_registry(request: Request) -> TaskRegistry:
    """Return the registry owned by the running application."""

    return request.app.state.task_registry


@router.get("/items", response_model=list[TaskResponse])
def list_items(registry: TaskRegistry = Depends(get_task_registry)) -> list[TaskResponse]:
    """List all tasks in insertion order."""

    return [TaskResponse(**task.to_dict()) for task in registry.list_tasks()]


@router.get("/items/{task_id}", response_model=TaskResponse)
def get_item(task_id: int, registry: TaskRegistry = Depends(get_task_registry)) -> TaskResponse:
    """Fetch a single task.

    Raises:
        NotFoundAppError: Rendered as 400 when the id is unknown.
    """

    return TaskResponse(**registry.get(task_id).to_dict())


@router.post(
    "/items",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_rate_limit)],
)
def create_item(
    payload: TaskCreateRequest,
    registry: TaskRegistry = Depends(get_task_registry),
) -> TaskResponse:
    """Create a task and return it with its new id.

    Args:
        payload: Decoded request body with ``name`` and optional ``done``.

    Returns:
        TaskResponse: The stored task.

    Raises:
        ValidationAppError: Rendered as 400 when the name is blank.
        RateLimitedAppError: Rendered as 429 when creation is gated.
    """

    task = registry.create(name=payload.name, done=payload.done)
    logger.info("task.created", extra={"task_id": task.id, "task_done": task.done})
    return TaskResponse(**task.to_dict())


@router.put("/items/{task_id}", response_model=TaskDoneResponse)
def mark_item_done(
    task_id: int,
    registry: TaskRegistry = Depends(get_task_registry),
) -> TaskDoneResponse:
    """Mark a task as done and return ``{"done": id}``."""

    task = registry.mark_done(task_id)
    logger.info("task.done", extra={"task_id": task.id})
    return TaskDoneResponse(done=task.id)


@router.delete("/items/{task_id}", response_model=TaskDeletedResponse)
def delete_item(
    task_id: int,
    registry: TaskRegistry = Depends(get_task_registry),
) -> TaskDeletedResponse:
    """Delete a task and return ``{"deleted": id}``."""

    deleted_id = registry.delete(task_id)
    logger.info("task.deleted", extra={"task_id": deleted_id})
    return TaskDeletedResponse(deleted=deleted_id)
