from typing import cast

import inject
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.kanban.application.auth import AuthService
from src.kanban.application.services import TaskService
from src.kanban.domain.models import Identity
from src.setup.api_config import ApiSettings

bearer_scheme = HTTPBearer(auto_error=False)

_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_task_service() -> TaskService:
    return TaskService()


def get_auth_service() -> AuthService:
    return cast(AuthService, inject.instance(AuthService))


def get_settings(request: Request) -> ApiSettings:
    return request.app.state.settings


def require_identity(
    request: Request,
    _credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    """
    Resolve the caller from ``Authorization: Bearer <token>`` or answer 401.

    ``bearer_scheme`` only documents the scheme in OpenAPI; the header is parsed
    here so each failure gets its own message.
    """
    header = request.headers.get("Authorization")
    if not header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers=_CHALLENGE,
        )
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or " " in token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token format. Expected: Bearer <token>",
            headers=_CHALLENGE,
        )
    if not token.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is missing",
            headers=_CHALLENGE,
        )

    identity = auth_service.verify(token.strip())
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers=_CHALLENGE,
        )
    request.state.identity = identity
    return identity

