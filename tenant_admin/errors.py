# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application errors and the centralized exception handlers."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenant_admin.schemas.common import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error carrying an HTTP status code.

    Operational errors are expected failures (bad input, missing records)
    whose message is safe to return to the client. Non-operational errors
    are reported as a generic 500.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_operational: bool = True,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


def _request_meta(request: Request) -> str:
    client = request.client.host if request.client else "-"
    user_agent = request.headers.get("user-agent", "-")
    return f"{request.method} {request.url.path} ip={client} ua={user_agent}"


def _error_response(
    status_code: int,
    message: str,
    error: str | None = None,
    errors: list[FieldError] | None = None,
) -> JSONResponse:
    body = ErrorResponse(message=message, error=error, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.is_operational:
        logger.warning(f"{exc.status_code} {exc.message} ({_request_meta(request)})")
        return _error_response(exc.status_code, exc.message, error=type(exc).__name__)

    logger.error(
        f"Non-operational error: {exc.message} ({_request_meta(request)})",
        exc_info=exc,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    logger.warning(f"{exc.status_code} {message} ({_request_meta(request)})")
    response = _error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query" prefix from the location
        location = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append(FieldError(field=".".join(location) or "request", message=err.get("msg", "")))
    logger.info(f"400 Validation failed ({_request_meta(request)}): {errors}")
    return _error_response(
        status.HTTP_400_BAD_REQUEST, "Validation failed", errors=errors
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error ({_request_meta(request)}): {exc}", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
