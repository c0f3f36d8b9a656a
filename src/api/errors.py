"""Exception handlers rendering failures as ``{"error": "<Kind>: <message>"}``.

Exceptions without a handler here are caught by UnhandledErrorMiddleware.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.exceptions import AppError

logger = logging.getLogger(__name__)


def error_response(status_code: int, kind: str, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": f"{kind}: {message}"},
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle errors raised by services and dependencies."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc.__cause__)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc.status_code, exc.kind, exc.message, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed request bodies and parameters."""
    return error_response(400, "ValidationError", _describe_validation_error(exc))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle routing errors such as unknown paths or methods."""
    return error_response(exc.status_code, "HTTPException", str(exc.detail), headers=exc.headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle store failures without exposing driver messages."""
    logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(500, "InternalFailure", "Database operation failed")



def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
