from src.kanban.domain.models.auth import AuthToken, Identity
from src.kanban.domain.models.task import NewTask, Task
from src.kanban.domain.models.task_status import TaskStatus

__all__ = [
    "Task",
    "NewTask",
    "TaskStatus",
    "AuthToken",
    "Identity",
]
