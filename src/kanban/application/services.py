import logging
from typing import cast

import inject

from src.kanban.domain.exceptions import (
    PersistenceError,
    StorageError,
    TaskNotFoundError,
    ValidationError,
)
from src.kanban.domain.models import NewTask, Task, TaskStatus
from src.kanban.domain.repositories import TaskRepository

logger = logging.getLogger(__name__)

TITLE_REQUIRED_MESSAGE = "Title is required and cannot be empty."


def _normalize_title(title: object) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(TITLE_REQUIRED_MESSAGE, field="title")
    return title.strip()


def _normalize_description(description: object) -> str | None:
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("Description must be a string if provided", field="description")
    return description.strip() or None


class TaskService:
    """Business rules for tasks. Every task mutation goes through here."""

    def __init__(self, repository: TaskRepository | None = None) -> None:
        self._repository = repository or cast(
            TaskRepository, inject.instance(TaskRepository)
        )

    async def create_task(self, title: str, description: str | None = None) -> Task:
        """
        Validate and trim the input, then persist a new ``PENDING`` task.
        """
        new_task = NewTask(
            title=_normalize_title(title),
            description=_normalize_description(description),
            status=TaskStatus.PENDING,
        )
        try:
            task = await self._repository.create(new_task)
        except StorageError as exc:
            raise PersistenceError("create task", exc) from exc
        logger.info("Task created", extra={"task_id": task.id})
        return task

    async def list_tasks(self) -> list[Task]:
        """Return all tasks, newest first."""
        try:
            return await self._repository.list_all_ordered_by_creation_descending()
        except StorageError as exc:
            raise PersistenceError("retrieve tasks", exc) from exc

    async def update_task_status(self, task_id: str, status: TaskStatus | str) -> Task:
        """
        Move a task to ``status``.

        The status is validated before the task is looked up, so an unknown
        status is reported even for an id that does not exist.
        """
        new_status = TaskStatus.parse(status)
        await self._require(task_id)
        try:
            task = await self._repository.update_status(task_id, new_status)
        except StorageError as exc:
            raise PersistenceError("update task status", exc) from exc
        logger.info(
            "Task status updated",
            extra={"task_id": task_id, "status": new_status.value},
        )
        return task

    async def update_task_fields(
        self, task_id: str, title: str, description: str | None = None
    ) -> Task:
        """Replace the title and description of an existing task."""
        clean_title = _normalize_title(title)
        clean_description = _normalize_description(description)
        await self._require(task_id)
        try:
            return await self._repository.update_fields(
                task_id, clean_title, clean_description
            )
        except StorageError as exc:
            raise PersistenceError("update task", exc) from exc

    async def find_by_id(self, task_id: str) -> Task | None:
        """Return the task or None when the id is unknown."""
        try:
            return await self._repository.find_by_id(task_id)
        except StorageError as exc:
            raise PersistenceError("find task", exc) from exc

    async def _require(self, task_id: str) -> Task:
        task = await self.find_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task
