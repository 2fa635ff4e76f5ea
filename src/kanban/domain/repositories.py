from __future__ import annotations

from typing import Protocol

from src.kanban.domain.models.task import NewTask, Task
from src.kanban.domain.models.task_status import TaskStatus


class TaskRepository(Protocol):
    """Persistence contract for tasks. Implementations do not validate input."""

    async def create(self, task: NewTask) -> Task:
        """Persist a new task and return it with id and timestamps assigned."""

    async def list_all_ordered_by_creation_descending(self) -> list[Task]:
        """Return every task, newest first."""

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        """Replace the status of ``task_id``, refresh ``updated_at`` and return the task."""

    async def update_fields(
        self, task_id: str, title: str, description: str | None
    ) -> Task:
        """Replace title and description of ``task_id`` and refresh ``updated_at``."""

    async def find_by_id(self, task_id: str) -> Task | None:
        """Return the task identified by ``task_id`` or None."""
