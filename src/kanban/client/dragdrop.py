from __future__ import annotations

from dataclasses import dataclass

from src.kanban.domain.models import Task, TaskStatus


@dataclass(frozen=True)
class DragData:
    task_id: str
    source_status: TaskStatus


class DragDropService:
    """Tracks the card being dragged and decides whether a drop is a move."""

    def __init__(self) -> None:
        self._drag: DragData | None = None

    @property
    def current(self) -> DragData | None:
        return self._drag

    def start_drag(self, task: Task) -> DragData:
        self._drag = DragData(task_id=task.id, source_status=task.status)
        return self._drag

    def end_drag(self) -> None:
        self._drag = None

    def drop(self, target_status: TaskStatus) -> DragData | None:
        """
        Finish the drag over ``target_status``. Returns the drag data when the
        drop is a real move, or None for a drop onto the source column.
        """
        drag, self._drag = self._drag, None
        if drag is None or drag.source_status == target_status:
            return None
        return drag
