from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import httpx
import inject
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.kanban.client.context import build_client_context
from src.kanban.domain.exceptions import StorageError, TaskNotFoundError
from src.kanban.domain.models import NewTask, Task, TaskStatus
from src.kanban.domain.repositories import TaskRepository
from src.kanban.infrastructure.sql.orm import DatabaseOrm
from src.kanban.infrastructure.sql.repositories import SqlTaskRepository
from src.kanban.presentation.app import create_app
from src.kanban.presentation.schemas import TaskResponse
from src.setup.api_config import ApiSettings
from src.setup.app_config import build_binder
from src.setup.auth_config import AuthSettings
from src.setup.client_config import ClientSettings
from src.setup.db_config import DatabaseSettings

USERNAME = "admin"
PASSWORD = "s3cret"


class StubTaskRepository(TaskRepository):
    """In-memory task store. Set ``fail_with`` to make every call raise StorageError."""

    def __init__(self) -> None:
        self.tasks: dict[str, Task] = {}
        self.fail_with: Exception | None = None
        self.calls: list[str] = []
        self._clock = datetime(2024, 1, 1, tzinfo=UTC)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None:
            raise StorageError(operation, self.fail_with)

    async def create(self, task: NewTask) -> Task:
        self._check("create")
        now = self._tick()
        stored = Task(
            id=uuid4().hex,
            title=task.title,
            description=task.description,
            status=task.status,
            created_at=now,
            updated_at=now,
        )
        self.tasks[stored.id] = stored
        return stored

    async def list_all_ordered_by_creation_descending(self) -> list[Task]:
        self._check("list")
        return sorted(self.tasks.values(), key=lambda t: t.created_at, reverse=True)

    async def update_status(self, task_id: str, status: TaskStatus) -> Task:
        self._check("update_status")
        if task_id not in self.tasks:
            raise TaskNotFoundError(task_id)
        updated = self.tasks[task_id].model_copy(
            update={"status": status, "updated_at": self._tick()}
        )
        self.tasks[task_id] = updated
        return updated

    async def update_fields(
        self, task_id: str, title: str, description: str | None
    ) -> Task:
        self._check("update_fields")
        if task_id not in self.tasks:
            raise TaskNotFoundError(task_id)
        updated = self.tasks[task_id].model_copy(
            update={"title": title, "description": description, "updated_at": self._tick()}
        )
        self.tasks[task_id] = updated
        return updated

    async def find_by_id(self, task_id: str) -> Task | None:
        self._check("find")
        return self.tasks.get(task_id)


@pytest.fixture
def stub_repository() -> StubTaskRepository:
    return StubTaskRepository()


@pytest.fixture
def auth_settings() -> AuthSettings:
    return AuthSettings(
        JWT_SECRET="test-secret",
        JWT_EXPIRES_IN="24h",
        AUTH_USERNAME=USERNAME,
        AUTH_PASSWORD=PASSWORD,
    )


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    return DatabaseSettings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")


@pytest_asyncio.fixture
async def orm(db_settings: DatabaseSettings):
    database = DatabaseOrm(db_settings.DATABASE_URL)
    await database.create_schema()
    yield database
    await database.dispose()


@pytest.fixture
def sql_repository(orm: DatabaseOrm) -> SqlTaskRepository:
    return SqlTaskRepository(orm)


@pytest.fixture
def configured_di(db_settings: DatabaseSettings, auth_settings: AuthSettings):
    """Wire the real SQLite repository and auth gate into the injector."""
    inject.clear_and_configure(build_binder(db_settings, auth_settings))
    yield
    inject.clear()


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(APP_NAME="Test API", APP_VERSION="0.1.0", SANITIZE_HTML=True)


@pytest.fixture
def api_client(configured_di: None, api_settings: ApiSettings):
    """FastAPI test client backed by a throwaway SQLite database."""
    app = create_app(api_settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers(api_client: TestClient) -> dict[str, str]:
    response = api_client.post(
        "/auth/login", json={"username": USERNAME, "password": PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


class FakeTaskServer:
    """
    Minimal stand-in for the task API behind ``httpx.MockTransport``.
    ``fail_status_updates`` makes every status change answer 500.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, Task] = {}
        self.requests: list[tuple[str, str]] = []
        self.fail_status_updates = False
        self.reject_token = False
        self._clock = datetime(2024, 1, 1, tzinfo=UTC)

    def add(self, title: str, status: TaskStatus = TaskStatus.PENDING) -> Task:
        self._clock += timedelta(seconds=1)
        task = Task(
            id=uuid4().hex,
            title=title,
            status=status,
            created_at=self._clock,
            updated_at=self._clock,
        )
        self.tasks[task.id] = task
        return task

    def count(self, method: str, prefix: str = "/tasks") -> int:
        return sum(1 for m, path in self.requests if m == method and path.startswith(prefix))

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))

        if path == "/auth/login":
            body = json.loads(request.content)
            if body.get("password") != PASSWORD:
                return self._error(401, "Unauthorized", "Invalid username or password")
            return httpx.Response(200, json={"token": "fake-token", "expiresIn": "24h"})

        if self.reject_token or request.headers.get("Authorization") != "Bearer fake-token":
            return self._error(401, "Unauthorized", "Invalid or expired token")

        parts = path.strip("/").split("/")
        if method == "GET" and parts == ["tasks"]:
            ordered = sorted(self.tasks.values(), key=lambda t: t.created_at, reverse=True)
            return httpx.Response(200, json=[self._dump(t) for t in ordered])
        if method == "POST" and parts == ["tasks"]:
            body = json.loads(request.content)
            task = self.add(body["title"]).model_copy(
                update={"description": body.get("description")}
            )
            self.tasks[task.id] = task
            return httpx.Response(201, json=self._dump(task))
        if method == "PUT" and len(parts) >= 2 and parts[0] == "tasks":
            task = self.tasks.get(parts[1])
            if task is None:
                return self._error(404, "Not Found", f"Task with ID {parts[1]} not found")
            body = json.loads(request.content)
            if parts[2:] == ["status"]:
                if self.fail_status_updates:
                    return self._error(500, "Internal Server Error", "Failed to update task status")
                changes = {"status": TaskStatus(body["status"])}
            else:
                changes = {"title": body["title"], "description": body.get("description")}
            self._clock += timedelta(seconds=1)
            task = task.model_copy(update={**changes, "updated_at": self._clock})
            self.tasks[task.id] = task
            return httpx.Response(200, json=self._dump(task))
        return self._error(404, "Not Found", "Route not found")

    @staticmethod
    def _dump(task: Task) -> dict:
        return TaskResponse.from_task(task).model_dump(
            mode="json", by_alias=True, exclude_none=True
        )

    @staticmethod
    def _error(status_code: int, error: str, message: str) -> httpx.Response:
        return httpx.Response(
            status_code,
            json={
                "error": error,
                "message": message,
                "statusCode": status_code,
                "timestamp": "2024-01-01T00:00:00Z",
            },
        )


@pytest.fixture
def fake_server() -> FakeTaskServer:
    return FakeTaskServer()


@pytest_asyncio.fixture
async def client_context(fake_server: FakeTaskServer):
    """Client services talking to ``fake_server``, already logged in."""
    settings = ClientSettings(API_BASE_URL="http://testserver", RELOAD_DELAY_SECONDS=0)
    context = build_client_context(settings, transport=httpx.MockTransport(fake_server.handle))
    context.auth.set_token("fake-token")
    yield context
    await context.aclose()
