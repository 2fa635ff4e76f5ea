from fastapi import APIRouter, Depends

from src.kanban.application.auth import AuthService
from src.kanban.presentation.dependencies import get_auth_service
from src.kanban.presentation.errors import (
    unauthorized_response,
    validation_error_response,
)
from src.kanban.presentation.schemas import LoginRequest, LoginResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Exchanges the shared username and password for a bearer token.",
    responses={**validation_error_response, **unauthorized_response},
)
def login(body: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    token = auth_service.authenticate(body.username, body.password)
    return LoginResponse.from_token(token)
