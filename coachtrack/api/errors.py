"""
Exception handlers.

Every error leaves the API as `{"error": "<message>"}`; validation errors
add a `details` list. Route handlers raise domain errors and let these
handlers pick the status code.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.training.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    StoreError,
    TrainingError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    StoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def status_code_for(exc: TrainingError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _clean_message(message: str) -> str:
    # pydantic prefixes messages of ValueErrors raised in validators
    return message.removeprefix("Value error, ")


def format_validation_errors(exc: RequestValidationError) -> list[dict]:
    details = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append({
            "field": ".".join(location) or None,
            "message": _clean_message(error.get("msg", "Invalid value")),
        })
    return details


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to an application."""

    @app.exception_handler(TrainingError)
    async def training_error_handler(request: Request, exc: TrainingError):
        status_code = status_code_for(exc)

        if status_code >= 500:
            logger.error(
                "Store failure",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "error": str(exc),
                },
            )
            message = INTERNAL_ERROR_MESSAGE
        else:
            logger.info(
                "Request rejected",
                extra={
                    "path": request.url.path,
                    "status_code": status_code,
                    "error": str(exc),
                },
            )
            message = str(exc)

        return JSONResponse(status_code=status_code, content={"error": message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = format_validation_errors(exc)

        logger.info(
            "Validation error",
            extra={"path": request.url.path, "errors": details},
        )

        message = details[0]["message"] if details else "Invalid data"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": message, "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(message)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Prevents stack traces from leaking to clients. The full error is
        logged server-side and the client gets a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR_MESSAGE},
        )
