from datetime import datetime

from pydantic import BaseModel, Field

from src.kanban.domain.models.task_status import TaskStatus


class Task(BaseModel):
    id: str = Field(description="Unique task identifier.")
    title: str = Field(description="Non-empty, trimmed task title.")
    description: str | None = Field(
        default=None, description="Optional description; None when absent."
    )
    status: TaskStatus = Field(
        default=TaskStatus.PENDING, description="Board column the task belongs to."
    )
    created_at: datetime = Field(description="Creation time, never mutated.")
    updated_at: datetime = Field(description="Time of the last mutation.")


class NewTask(BaseModel):
    """Validated input handed to the store when creating a task."""

    title: str = Field(description="Trimmed, non-empty title.")
    description: str | None = Field(default=None, description="Trimmed description.")
    status: TaskStatus = Field(default=TaskStatus.PENDING)
