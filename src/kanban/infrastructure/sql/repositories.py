from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from src.kanban.domain.exceptions import StorageError, TaskNotFoundError
from src.kanban.domain.models.task import NewTask, Task
from src.kanban.domain.models.task_status import TaskStatus
from src.kanban.domain.repositories import TaskRepository
from src.kanban.infrastructure.sql.mappers import OrmMapper
from src.kanban.infrastructure.sql.orm import DatabaseOrm, TaskRow

logger = logging.getLogger(__name__)


class SqlTaskRepository(TaskRepository):
    """Task storage using SQLAlchemy async sessions."""

    def __init__(self, orm: DatabaseOrm) -> None:
        self._orm = orm

    async def create(self, task: NewTask) -> Task:
        """Persist a new task and return it."""
        row = OrmMapper.to_task_row(uuid4().hex, task, datetime.now(UTC))
        try:
            async with self._orm.session_factory() as session:
                async with session.begin():
                    session.add(row)
        except SQLAlchemyError as exc:
            raise StorageError("create", exc) from exc
        logger.debug("Task stored", extra={"task_id": row.id})
        return OrmMapper.to_domain_task(row)

    async def list_all_ordered_by_creation_descending(self) -> list[Task]:
        """List every task, newest first."""
        statement = select(TaskRow).order_by(TaskRow.created_at.desc())
        try:
            async with self._orm.session_factory() as session:
                result = await session.execute(statement)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("list", exc) from exc
        return [OrmMapper.to_domain_task(row) for row in rows]

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        """Replace the task status and refresh its timestamp."""
        try:
            async with self._orm.session_factory() as session:
                async with session.begin():
                    row = await session.get(TaskRow, task_id)
                    if row is None:
                        raise TaskNotFoundError(task_id)
                    row.status = status
                    row.updated_at = self._next_timestamp(row.updated_at)
        except SQLAlchemyError as exc:
            raise StorageError("update status", exc) from exc
        return OrmMapper.to_domain_task(row)

    async def update_fields(
        self, task_id: str, title: str, description: str | None
    ) -> Task:
        """Replace title/description and refresh the timestamp."""
        try:
            async with self._orm.session_factory() as session:
                async with session.begin():
                    row = await session.get(TaskRow, task_id)
                    if row is None:
                        raise TaskNotFoundError(task_id)
                    row.title = title
                    row.description = description
                    row.updated_at = self._next_timestamp(row.updated_at)
        except SQLAlchemyError as exc:
            raise StorageError("update fields", exc) from exc
        return OrmMapper.to_domain_task(row)

    async def find_by_id(self, task_id: str) -> Task | None:
        """Fetch a task by id."""
        try:
            async with self._orm.session_factory() as session:
                row = await session.get(TaskRow, task_id)
        except SQLAlchemyError as exc:
            raise StorageError("find", exc) from exc
        if row is None:
            return None
        return OrmMapper.to_domain_task(row)

    @staticmethod
    def _next_timestamp(previous: datetime) -> datetime:
        # updated_at must move strictly forward even when the clock has not.
        previous = OrmMapper.as_utc(previous)
        now = datetime.now(UTC)
        if now <= previous:
            return previous + timedelta(microseconds=1)
        return now
