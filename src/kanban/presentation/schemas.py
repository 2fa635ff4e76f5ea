from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.kanban.domain.models import AuthToken, Task, TaskStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateTaskRequest(BaseModel):
    title: str = Field(max_length=200, description="Task title; must not be blank.")
    description: str | None = Field(
        default=None, max_length=1000, description="Optional task description."
    )


class UpdateTaskRequest(CreateTaskRequest):
    pass


class UpdateTaskStatusRequest(BaseModel):
    # Kept as a plain string so unknown tags reach the service's status check.
    status: str = Field(description="One of PENDING, IN_PROGRESS, COMPLETED.")


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Account username.")
    password: str = Field(min_length=1, description="Account password.")


class TaskResponse(CamelModel):
    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            status=self.status,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class LoginResponse(CamelModel):
    token: str
    expires_in: str

    @classmethod
    def from_token(cls, token: AuthToken) -> "LoginResponse":
        return cls(token=token.token, expires_in=token.expires_in)


class FieldViolation(BaseModel):
    field: str
    message: str


class ErrorResponse(CamelModel):
    error: str
    message: str
    status_code: int
    timestamp: datetime
    details: list[FieldViolation] | None = None


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str = "Task Management API is running"
