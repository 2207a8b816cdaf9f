"""
Central translation of exceptions into HTTP responses.

Every error leaves the API in one envelope:

    {"success": false, "message": "...", "errors": [...]?, "stack": "..."?}

"errors" is present for validation failures. "stack" is present for
server errors outside production.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from messhub.domain.exceptions import (
    AuthenticationError,
    BadRequestError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from messhub.infrastructure.config import Settings

logger = logging.getLogger(__name__)

# Checked in order; subclasses inherit their family's status.
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (BadRequestError, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
]

_INTERNAL_ERROR = "Internal Server Error"


def status_for(exc: Exception) -> int:
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _field_path(loc) -> str:
    # drop the "body"/"query"/"path" prefix pydantic puts in front
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register the exception handlers on *app*."""

    def _server_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = {"success": False, "message": _INTERNAL_ERROR}
        if not settings.is_production:
            body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        code = status_for(exc)
        if code >= 500:
            return _server_error(request, exc)
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, code, exc.message)
        body = {"success": False, "message": exc.message}
        if isinstance(exc, ValidationError):
            body["errors"] = exc.errors
        headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
        return JSONResponse(status_code=code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [f"{_field_path(e['loc'])}: {e['msg']}" for e in exc.errors()]
        logger.warning("%s %s -> 400: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": "Validation error", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return _server_error(request, exc)
