from __future__ import annotations

from fastapi import APIRouter, Depends, status

from src.kanban.application.services import TaskService
from src.kanban.presentation.dependencies import (
    get_settings,
    get_task_service,
    require_identity,
)
from src.kanban.presentation.errors import (
    internal_error_response,
    not_found_response,
    unauthorized_response,
    validation_error_response,
)
from src.kanban.presentation.sanitize import sanitize_task_input
from src.kanban.presentation.schemas import (
    CreateTaskRequest,
    TaskResponse,
    UpdateTaskRequest,
    UpdateTaskStatusRequest,
)
from src.setup.api_config import ApiSettings

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(require_identity)],
    responses={**unauthorized_response, **internal_error_response},
)


def _clean_input(
    body: CreateTaskRequest, settings: ApiSettings
) -> tuple[str, str | None]:
    if settings.SANITIZE_HTML:
        return sanitize_task_input(body.title, body.description)
    return body.title, body.description


@router.post(
    "",
    response_model=TaskResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    description="Creates a task in the PENDING column. The title must not be blank.",
    responses={**validation_error_response},
)
async def create_task(
    body: CreateTaskRequest,
    service: TaskService = Depends(get_task_service),
    settings: ApiSettings = Depends(get_settings),
):
    title, description = _clean_input(body, settings)
    task = await service.create_task(title, description)
    return TaskResponse.from_task(task)


@router.get(
    "",
    response_model=list[TaskResponse],
    response_model_exclude_none=True,
    summary="List tasks",
    description="Returns every task, newest first.",
)
async def list_tasks(service: TaskService = Depends(get_task_service)):
    tasks = await service.list_tasks()
    return [TaskResponse.from_task(task) for task in tasks]


@router.put(
    "/{task_id}/status",
    response_model=TaskResponse,
    response_model_exclude_none=True,
    summary="Move a task",
    description="Sets the task status to PENDING, IN_PROGRESS or COMPLETED.",
    responses={**validation_error_response, **not_found_response},
)
async def update_task_status(
    task_id: str,
    body: UpdateTaskStatusRequest,
    service: TaskService = Depends(get_task_service),
):
    task = await service.update_task_status(task_id, body.status)
    return TaskResponse.from_task(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    response_model_exclude_none=True,
    summary="Edit a task",
    description="Replaces the title and description of a task.",
    responses={**validation_error_response, **not_found_response},
)
async def update_task(
    task_id: str,
    body: UpdateTaskRequest,
    service: TaskService = Depends(get_task_service),
    settings: ApiSettings = Depends(get_settings),
):
    title, description = _clean_input(body, settings)
    task = await service.update_task_fields(task_id, title, description)
    return TaskResponse.from_task(task)
