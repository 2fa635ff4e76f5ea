from __future__ import annotations

from datetime import UTC, datetime

from src.kanban.domain.models.task import NewTask, Task
from src.kanban.infrastructure.sql.orm import TaskRow


class OrmMapper:
    @staticmethod
    def to_task_row(task_id: str, task: NewTask, created_at: datetime) -> TaskRow:
        return TaskRow(
            id=task_id,
            title=task.title,
            description=task.description,
            status=task.status,
            created_at=created_at,
            updated_at=created_at,
        )

    @staticmethod
    def to_domain_task(row: TaskRow) -> Task:
        return Task(
            id=row.id,
            title=row.title,
            description=row.description,
            status=row.status,
            created_at=OrmMapper.as_utc(row.created_at),
            updated_at=OrmMapper.as_utc(row.updated_at),
        )

    @staticmethod
    def as_utc(value: datetime) -> datetime:
        # SQLite drops tzinfo on the way back; stored values are always UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
