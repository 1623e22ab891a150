"""Map application exceptions to JSON error responses of the form {"message": ...}."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from optionsdesk.core.exceptions import (
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidCurrentPasswordError,
    InvalidInputError,
    InvalidTokenError,
    MissingAuthHeaderError,
    OptionsDeskError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

# First isinstance match wins.
STATUS_BY_ERROR: tuple[tuple[type[OptionsDeskError], int], ...] = (
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (DuplicateEmailError, status.HTTP_400_BAD_REQUEST),
    (InvalidCurrentPasswordError, status.HTTP_400_BAD_REQUEST),
    (InvalidCredentialsError, status.HTTP_401_UNAUTHORIZED),
    (InvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (MissingAuthHeaderError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (UserNotFoundError, status.HTTP_404_NOT_FOUND),
)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def status_for(exc: OptionsDeskError) -> int:
    for exc_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def handle_app_error(request: Request, exc: OptionsDeskError) -> JSONResponse:
    status_code = status_for(exc)
    headers = BEARER_CHALLENGE if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"message": exc.message}, headers=headers)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation failed.", "errors": errors},
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the JSON error handlers on app."""
    app.add_exception_handler(OptionsDeskError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
