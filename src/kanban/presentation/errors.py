from __future__ import annotations

import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.kanban.domain.exceptions import (
    InvalidCredentialsError,
    TaskNotFoundError,
    ValidationError,
)
from src.kanban.presentation.schemas import ErrorResponse, FieldViolation

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "Validation Error"
NOT_FOUND = "Not Found"
UNAUTHORIZED = "Unauthorized"
INTERNAL_ERROR = "Internal Server Error"

_KIND_BY_STATUS = {
    status.HTTP_400_BAD_REQUEST: VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND: NOT_FOUND,
    status.HTTP_500_INTERNAL_SERVER_ERROR: INTERNAL_ERROR,
}


def error_response(
    request: Request,
    status_code: int,
    message: str,
    *,
    details: list[FieldViolation] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    kind = _KIND_BY_STATUS.get(status_code) or HTTPStatus(status_code).phrase
    body = ErrorResponse(
        error=kind,
        message=message,
        status_code=status_code,
        timestamp=datetime.now(UTC),
        details=details,
    )
    logger.error(
        "%s: %s",
        kind,
        message,
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        headers=headers,
    )


def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    details = [FieldViolation(field=exc.field, message=exc.message)] if exc.field else None
    return error_response(request, status.HTTP_400_BAD_REQUEST, exc.message, details=details)


def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    def loc_to_field(loc: tuple[Any, ...]) -> str:
        parts = [str(part) for part in loc if part not in ("body", "path", "query")]
        return ".".join(parts) or "body"

    violations = [
        FieldViolation(field=loc_to_field(tuple(error["loc"])), message=error["msg"])
        for error in exc.errors()
    ]
    if len(violations) == 1:
        message = f"{violations[0].field}: {violations[0].message}"
    else:
        message = "Multiple validation errors: " + "; ".join(
            f"{v.field}: {v.message}" for v in violations
        )
    return error_response(
        request, status.HTTP_400_BAD_REQUEST, message, details=violations
    )


def task_not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return error_response(request, status.HTTP_404_NOT_FOUND, str(exc))


def invalid_credentials_handler(
    request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    return error_response(request, status.HTTP_401_UNAUTHORIZED, str(exc))


def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(
        request,
        exc.status_code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        exc_info=exc,
        extra={"method": request.method, "path": request.url.path},
    )
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.exception_handler(ValidationError)(validation_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(TaskNotFoundError)(task_not_found_handler)
    app.exception_handler(InvalidCredentialsError)(invalid_credentials_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(unexpected_exception_handler)


def _example(status_code: int, message: str) -> dict[str, Any]:
    return {
        "description": _KIND_BY_STATUS[status_code],
        "model": ErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": _KIND_BY_STATUS[status_code],
                    "message": message,
                    "statusCode": status_code,
                    "timestamp": "2024-01-01T00:00:00Z",
                }
            }
        },
    }


validation_error_response = {400: _example(400, "Title is required and cannot be empty.")}
unauthorized_response = {401: _example(401, "Invalid or expired token")}
not_found_response = {404: _example(404, "Task with ID example not found")}
internal_error_response = {500: _example(500, "Failed to retrieve tasks")}
