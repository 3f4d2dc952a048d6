"""
Error handling decorators and utilities for API endpoints.

One mapping from application exceptions to HTTP status codes, used both by
the per-route decorator and by the app-level handlers that catch errors
raised in dependencies (e.g. the pool running dry while a request waits
for a connection).
"""

import inspect
import logging
from functools import wraps
from typing import Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from constants import ErrorCodes, HTTPStatus
from exceptions import (
    ApplicationError,
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    NotFoundError,
    PoolExhaustedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first: PoolExhaustedError < DatabaseConnectionError < DatabaseError
_ERROR_MAP = [
    (NotFoundError, HTTPStatus.NOT_FOUND, ErrorCodes.NOT_FOUND),
    (ValidationError, HTTPStatus.UNPROCESSABLE_ENTITY, ErrorCodes.VALIDATION),
    (ConfigurationError, HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.CONFIGURATION),
    (PoolExhaustedError, HTTPStatus.SERVICE_UNAVAILABLE, ErrorCodes.POOL_EXHAUSTED),
    (DatabaseConnectionError, HTTPStatus.SERVICE_UNAVAILABLE, ErrorCodes.CONNECTION),
    (DatabaseError, HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.DATABASE),
]


def _classify(error: ApplicationError) -> tuple[int, str]:
    for error_type, status, code in _ERROR_MAP:
        if isinstance(error, error_type):
            return status, code
    return HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.INTERNAL


def status_for(error: ApplicationError) -> int:
    """HTTP status code for an application error."""
    return _classify(error)[0]


def error_body(error: ApplicationError) -> dict:
    """
    Machine-readable error body.

    Returns:
        {"error": <code>, "message": <text>, "details": {...}}
    """
    return {
        "error": _classify(error)[1],
        "message": error.message,
        "details": error.details,
    }


def _log(operation_name: str, error: ApplicationError) -> None:
    status = status_for(error)
    if status < HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.warning(f"{operation_name} - {type(error).__name__}: {error.message}")
    else:
        logger.error(f"{operation_name} - {type(error).__name__}: {error.message}", exc_info=True)


def _to_http_exception(operation_name: str, error: Exception) -> HTTPException:
    if isinstance(error, ApplicationError):
        _log(operation_name, error)
        return HTTPException(status_code=status_for(error), detail=error_body(error))
    logger.error(f"{operation_name} - Unexpected error: {error}", exc_info=True)
    return HTTPException(
        status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
        detail={
            "error": ErrorCodes.INTERNAL,
            "message": f"{operation_name} failed. Please check server logs.",
            "details": {},
        },
    )


def handle_api_errors(operation_name: str):
    """
    Decorator to handle application errors consistently across endpoints.

    Catches application exceptions and converts them to HTTPException
    responses carrying the error_body() payload.

    Args:
        operation_name: Human-readable name of the operation (e.g., "Create post")

    Returns:
        Decorated function that handles errors uniformly

    Example:
        @router.post("/posts/new")
        @handle_api_errors("Create post")
        def create_post(...):
            return repo.create(...)
    """
    def decorator(func: Callable):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                # Re-raise HTTPException as-is to preserve status code and detail
                raise
            except Exception as e:
                raise _to_http_exception(operation_name, e) from e

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                raise _to_http_exception(operation_name, e) from e

        # Return appropriate wrapper based on whether the function is async
        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    """App-level handler for application errors raised outside a route body."""
    _log(f"{request.method} {request.url.path}", exc)
    return JSONResponse(status_code=status_for(exc), content={"detail": error_body(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application error handler on an app."""
    app.add_exception_handler(ApplicationError, application_error_handler)
