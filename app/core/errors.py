"""API error taxonomy and the handlers that render every error as {"message": ...}."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong!"


class ApiError(Exception):
    """Base class for errors that are safe to show to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateEmail(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class InvalidCredentials(ApiError):
    """Unknown email or wrong password; both render the same response."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Unauthorized(ApiError):
    """Missing, malformed, tampered or expired bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, token failed"


class Forbidden(ApiError):
    """Valid identity but locked account or insufficient privilege."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


def format_validation_error(exc: RequestValidationError) -> str:
    """First request validation error as 'field: message'."""
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    # loc starts with the request part (body, path, query, ...).
    loc = [str(part) for part in first.get("loc", ())[1:]]
    msg = str(first.get("msg", ValidationError.default_message)).removeprefix("Value error, ")
    return f"{'.'.join(loc)}: {msg}" if loc else msg


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": format_validation_error(exc)},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": INTERNAL_ERROR_MESSAGE},
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the handlers that map the taxonomy above onto HTTP responses."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
