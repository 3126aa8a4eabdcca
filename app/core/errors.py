"""
Application error types and the FastAPI handlers that render them.

Every error leaves the API as {"error": {"message": ..., "status": ...}}.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map directly to an HTTP status."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class EmptyUpdateError(BadRequestError):
    """Raised when a partial update carries no fields."""
    default_message = "No data"


class DuplicateKeyError(BadRequestError):
    """Raised when a create collides with an existing unique key."""
    default_message = "Duplicate key"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


def error_body(message, status_code: int) -> dict:
    return {"error": {"message": message, "status": status_code}}


def _format_validation_error(error: dict) -> str:
    # ("query", "minEmployees") -> "query.minEmployees: Input should be a valid integer"
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error-envelope handlers to the application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.status_code),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = [_format_validation_error(e) for e in exc.errors()]
        logger.warning(f"{request.method} {request.url.path} -> 400: {messages}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(messages, status.HTTP_400_BAD_REQUEST),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR),
        )
