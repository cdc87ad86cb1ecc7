"""Domain errors and their HTTP rendering."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TaskAPIError(Exception):
    """Base class for errors raised by the task service."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad request"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidQueryError(TaskAPIError, ValueError):
    """A list-query parameter is outside its allowed values or cannot be parsed."""

    error = "Invalid query"


class InvalidTaskIdError(TaskAPIError):
    error = "Invalid ID format"

    def __init__(self, task_id: str):
        super().__init__("Task ID must be a valid UUID")
        self.task_id = task_id


class TaskNotFoundError(TaskAPIError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Task not found"

    def __init__(self, task_id: str):
        super().__init__("No task found with the provided ID")
        self.task_id = task_id


def _validation_details(exc: RequestValidationError) -> list:
    details = []
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" location marker
        loc = [str(part) for part in err.get("loc", ())[1:]]
        details.append({"field": ".".join(loc), "message": err.get("msg", "")})
    return details


async def task_api_error_handler(request: Request, exc: TaskAPIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message, "status": exc.status_code},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _validation_details(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation error", "details": details},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskAPIError, task_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
