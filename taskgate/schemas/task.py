"""Pydantic schemas for task requests and responses."""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictBool


class TaskCreateRequest(BaseModel):
    """Payload accepted by ``POST /items``."""

    name: str = Field(..., description="Task name (must not be blank).")
    done: StrictBool = Field(
        False, description="Completion flag (JSON true/false only); defaults to false."
    )


class TaskResponse(BaseModel):
    """Serialized task record."""

    id: int = Field(..., description="Registry-assigned identifier.")
    name: str = Field(..., description="Task name.")
    done: bool = Field(..., description="Whether the task is completed.")


class TaskDoneResponse(BaseModel):
    done: int = Field(..., description="Id of the task marked as done.")


class TaskDeletedResponse(BaseModel):
    deleted: int = Field(..., description="Id of the removed task.")
