"""Error taxonomy shared by the services and the HTTP layer."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TaskflowError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class DuplicateUser(TaskflowError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidCredentials(TaskflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AuthenticationRequired(TaskflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidToken(TaskflowError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class NotFound(TaskflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Task not found"


class StoreError(TaskflowError):
    default_message = "Database error"


_BEARER_CHALLENGE = (AuthenticationRequired, InvalidToken, InvalidCredentials)


async def taskflow_error_handler(request: Request, exc: TaskflowError) -> JSONResponse:
    headers = None
    if isinstance(exc, _BEARER_CHALLENGE):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


def _describe(error: dict) -> str:
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    message = error.get("msg", "Invalid input")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _describe(errors[0]) if errors else "Invalid input"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskflowError, taskflow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
