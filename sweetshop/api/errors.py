"""Translate domain and request-validation errors into JSON {"message": ...} responses."""

import logging
from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sweetshop.core.errors import AuthError, InternalError, SweetShopError, ValidationError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def format_validation_errors(errors: Sequence[Any]) -> str:
    """
    One human-readable line from pydantic/FastAPI error dicts, e.g.
    'Validation error: Input should be greater than 0 at "quantity"'.
    """
    parts = []
    for err in errors:
        # Drop the request section (body/query/path) from the location.
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value")
        parts.append(f'{msg} at "{".".join(loc)}"' if loc else msg)
    return "Validation error: " + "; ".join(parts) if parts else "Validation error"


def _message(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def sweetshop_error_handler(request: Request, exc: SweetShopError) -> JSONResponse:
    if exc.status_code >= 500:
        # Never leak internal detail to the client.
        logger.error(
            "Request failed: %s", exc.message, extra={"path": request.url.path}
        )
        return _message(exc.status_code, INTERNAL_ERROR_MESSAGE)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return _message(exc.status_code, exc.message, headers)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _message(ValidationError.status_code, format_validation_errors(exc.errors()))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework errors (unknown route, wrong method) in the same shape as domain errors."""
    return _message(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(
        "Database error", extra={"path": request.url.path, "method": request.method}
    )
    return await sweetshop_error_handler(request, InternalError(type(exc).__name__))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error", extra={"path": request.url.path, "method": request.method}
    )
    return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SweetShopError, sweetshop_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
