from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from src.kanban.client.api import ApiError
from src.kanban.client.context import ClientContext
from src.kanban.client.dragdrop import DragData
from src.kanban.domain.models import Task, TaskStatus

logger = logging.getLogger(__name__)

COLUMN_TITLES: dict[TaskStatus, str] = {
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}

TaskUpdatedHandler = Callable[[Task], None]
DropHandler = Callable[[DragData, TaskStatus], Awaitable[None]]


class CardState(str, Enum):
    READONLY = "readonly"
    EDITING = "editing"


class TaskCard:
    """One task on the board. Editing is independent of the task's status."""

    def __init__(
        self,
        task: Task,
        context: ClientContext,
        on_updated: TaskUpdatedHandler,
    ) -> None:
        self._task = task
        self._context = context
        self._on_updated = on_updated
        self.state = CardState.READONLY
        self.draft_title = task.title
        self.draft_description = task.description or ""
        self.saving = False

    @property
    def task(self) -> Task:
        return self._task

    @property
    def draggable(self) -> bool:
        return self.state is CardState.READONLY

    def begin_edit(self) -> None:
        if self.state is CardState.EDITING:
            return
        self.state = CardState.EDITING
        self.draft_title = self._task.title
        self.draft_description = self._task.description or ""

    def cancel_edit(self) -> None:
        self.state = CardState.READONLY
        self.draft_title = self._task.title
        self.draft_description = self._task.description or ""

    def update_task(self, task: Task) -> None:
        self._task = task
        if self.state is CardState.READONLY:
            self.draft_title = task.title
            self.draft_description = task.description or ""

    async def save(self, title: str, description: str = "") -> bool:
        """
        Submit the edit. Returns True when the card is back in read-only mode.
        On failure the card stays in editing mode with the user's input kept.
        """
        self.draft_title = title
        self.draft_description = description
        new_title = title.strip()
        new_description = description.strip()

        if not new_title:
            self._context.notifier.error("Title is required")
            return False
        if new_title == self._task.title and new_description == (self._task.description or ""):
            self.cancel_edit()
            return True

        self.saving = True
        try:
            updated = await self._context.api.update_task(
                self._task.id, new_title, new_description or None
            )
        except ApiError as exc:
            self._context.notifier.error(f"Failed to update task: {exc.message}")
            return False
        finally:
            self.saving = False

        self._task = updated
        self.cancel_edit()
        self._on_updated(updated)
        return True


class TaskColumn:
    """Cards of a single status, in display order."""

    def __init__(
        self,
        status: TaskStatus,
        context: ClientContext,
        on_drop: DropHandler,
        on_task_updated: TaskUpdatedHandler,
    ) -> None:
        self.status = status
        self.title = COLUMN_TITLES[status]
        self._context = context
        self._on_drop = on_drop
        self._on_task_updated = on_task_updated
        self._cards: list[TaskCard] = []

    @property
    def cards(self) -> list[TaskCard]:
        return list(self._cards)

    def get_tasks(self) -> list[Task]:
        return [card.task for card in self._cards]

    def find_card(self, task_id: str) -> TaskCard | None:
        for card in self._cards:
            if card.task.id == task_id:
                return card
        return None

    def add_task(self, task: Task) -> TaskCard | None:
        """Append ``task``; a task of another status or already shown is ignored."""
        if task.status != self.status or self.find_card(task.id) is not None:
            return None
        card = TaskCard(task, self._context, self._on_task_updated)
        self._cards.append(card)
        return card

    def remove_task(self, task_id: str) -> Task | None:
        card = self.find_card(task_id)
        if card is None:
            return None
        self._cards.remove(card)
        return card.task

    def update_task(self, task: Task) -> None:
        card = self.find_card(task.id)
        if card is not None:
            card.update_task(task)

    def clear(self) -> None:
        self._cards.clear()

    async def drop(self) -> None:
        """Release the dragged card over this column."""
        drag = self._context.drag_drop.drop(self.status)
        if drag is not None:
            await self._on_drop(drag, self.status)


class TaskBoard:
    """
    Three status columns kept in line with the server.

    The server's task list is authoritative: a full load replaces every
    column wholesale, and a failed move is corrected by reloading.
    """

    def __init__(self, context: ClientContext) -> None:
        self._context = context
        self.columns: dict[TaskStatus, TaskColumn] = {
            status: TaskColumn(status, context, self._handle_drop, self._handle_task_updated)
            for status in TaskStatus
        }
        self.loading = False
        self._pending_reload: asyncio.Task[None] | None = None

    @property
    def pending_reload(self) -> asyncio.Task[None] | None:
        return self._pending_reload

    def column(self, status: TaskStatus) -> TaskColumn:
        return self.columns[status]

    def tasks_by_status(self) -> dict[TaskStatus, list[Task]]:
        return {status: column.get_tasks() for status, column in self.columns.items()}

    def find_card(self, task_id: str) -> TaskCard | None:
        for column in self.columns.values():
            card = column.find_card(task_id)
            if card is not None:
                return card
        return None

    async def init(self) -> None:
        await self.load_tasks(use_cache=True)

    async def load_tasks(self, use_cache: bool = False) -> None:
        """Paint from the cache when allowed, then replace everything with the server list."""
        if use_cache:
            cached = self._context.cache.get()
            if cached is not None:
                self._render(cached)

        self.loading = True
        try:
            tasks = await self._context.api.get_tasks()
        except ApiError as exc:
            self._context.notifier.error(f"Failed to load tasks: {exc.message}")
            return
        finally:
            self.loading = False

        self._render(tasks)
        self._context.cache.set(tasks)

    async def create_task(self, title: str, description: str = "") -> Task | None:
        if not title.strip():
            self._context.notifier.error("Title is required")
            return None
        try:
            task = await self._context.api.create_task(
                title.strip(), description.strip() or None
            )
        except ApiError as exc:
            self._context.notifier.error(f"Failed to create task: {exc.message}")
            return None

        self.columns[task.status].add_task(task)
        self._context.cache.clear()
        self._context.notifier.success("Task created")
        return task

    def start_drag(self, task_id: str) -> bool:
        card = self.find_card(task_id)
        if card is None or not card.draggable:
            return False
        self._context.drag_drop.start_drag(card.task)
        return True

    def end_drag(self) -> None:
        self._context.drag_drop.end_drag()

    async def drop_on(self, status: TaskStatus) -> None:
        await self.columns[status].drop()

    async def move_task(
        self, task_id: str, target: TaskStatus, source: TaskStatus
    ) -> Task | None:
        """Ask the server to move ``task_id``; local columns change only after it answers."""
        source_column = self.columns[source]
        try:
            updated = await self._context.api.update_task_status(task_id, target)
        except ApiError as exc:
            source_column.remove_task(task_id)
            self._context.notifier.error(f"Failed to move task: {exc.message}")
            self.schedule_reload()
            return None

        source_column.remove_task(task_id)
        self.columns[updated.status].add_task(updated)
        self._context.cache.clear()
        self._context.notifier.success(f"Task moved to {COLUMN_TITLES[updated.status]}")
        return updated

    def schedule_reload(self, delay: float | None = None) -> asyncio.Task[None]:
        if delay is None:
            delay = self._context.reload_delay
        if self._pending_reload is not None and not self._pending_reload.done():
            self._pending_reload.cancel()
        self._pending_reload = asyncio.create_task(self._reload_after(delay))
        return self._pending_reload

    async def _reload_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        await self.load_tasks(use_cache=False)

    async def _handle_drop(self, drag: DragData, target: TaskStatus) -> None:
        await self.move_task(drag.task_id, target, drag.source_status)

    def _handle_task_updated(self, task: Task) -> None:
        # an edit response can carry a status changed elsewhere
        for column in self.columns.values():
            if column.status != task.status and column.remove_task(task.id) is not None:
                self.columns[task.status].add_task(task)
                break
        else:
            self.columns[task.status].update_task(task)
        self._context.cache.clear()
        self._context.notifier.success("Task updated")

    def _render(self, tasks: list[Task]) -> None:
        for column in self.columns.values():
            column.clear()
        for task in tasks:
            self.columns[task.status].add_task(task)
