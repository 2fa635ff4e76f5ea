from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from src.kanban.client.auth import ClientAuth
from src.kanban.domain.models import AuthToken, Task, TaskStatus
from src.kanban.presentation.schemas import LoginResponse, TaskResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for any failed API call: HTTP error status, bad payload or network failure."""

    def __init__(
        self, message: str, status_code: int | None = None, kind: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.kind = kind

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == httpx.codes.UNAUTHORIZED


class ApiClient:
    """Async client for the task board REST API."""

    def __init__(self, http: httpx.AsyncClient, auth: ClientAuth) -> None:
        self._http = http
        self._auth = auth
        self._on_unauthorized: Callable[[], None] | None = None

    def set_unauthorized_handler(self, handler: Callable[[], None]) -> None:
        self._on_unauthorized = handler

    async def login(self, username: str, password: str) -> AuthToken:
        """Exchange credentials for a token and keep it for later requests."""
        data = await self._request(
            "POST",
            "/auth/login",
            json={"username": username, "password": password},
            authenticated=False,
        )
        try:
            response = LoginResponse.model_validate(data)
        except PydanticValidationError as exc:
            raise ApiError("Malformed login response") from exc
        self._auth.set_token(response.token)
        return AuthToken(token=response.token, expires_in=response.expires_in)

    async def get_tasks(self) -> list[Task]:
        data = await self._request("GET", "/tasks")
        if not isinstance(data, list):
            raise ApiError("Malformed task list response")
        return [self._decode_task(item) for item in data]

    async def create_task(self, title: str, description: str | None = None) -> Task:
        body: dict[str, Any] = {"title": title}
        if description:
            body["description"] = description
        return self._decode_task(await self._request("POST", "/tasks", json=body))

    async def update_task_status(self, task_id: str, status: TaskStatus) -> Task:
        data = await self._request(
            "PUT", f"/tasks/{task_id}/status", json={"status": TaskStatus(status).value}
        )
        return self._decode_task(data)

    async def update_task(
        self, task_id: str, title: str, description: str | None = None
    ) -> Task:
        body: dict[str, Any] = {"title": title}
        if description:
            body["description"] = description
        return self._decode_task(await self._request("PUT", f"/tasks/{task_id}", json=body))

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        authenticated: bool = True,
    ) -> Any:
        headers = {"Content-Type": "application/json"}
        token = self._auth.get_token() if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Request failed", extra={"method": method, "path": path})
            raise ApiError(f"Network error: {exc}") from exc

        if response.is_success:
            return response.json()

        error = self._decode_error(response)
        logger.error(
            "HTTP %s: %s",
            response.status_code,
            error.message,
            extra={"method": method, "path": path},
        )
        if error.is_unauthorized and authenticated:
            self._auth.logout()
            if self._on_unauthorized is not None:
                self._on_unauthorized()
        raise error

    @staticmethod
    def _decode_error(response: httpx.Response) -> ApiError:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and "message" in payload:
            return ApiError(
                str(payload["message"]),
                status_code=response.status_code,
                kind=payload.get("error"),
            )
        return ApiError(
            f"HTTP {response.status_code}: {response.reason_phrase}",
            status_code=response.status_code,
        )

    @staticmethod
    def _decode_task(data: Any) -> Task:
        try:
            return TaskResponse.model_validate(data).to_task()
        except PydanticValidationError as exc:
            raise ApiError(f"Malformed task in response: {exc}") from exc
