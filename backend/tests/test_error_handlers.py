import pytest
from fastapi import HTTPException

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
from utils.error_handlers import error_body, handle_api_errors, status_for


@pytest.mark.parametrize("error, status, code", [
    (NotFoundError("Post", "ghost"), HTTPStatus.NOT_FOUND, ErrorCodes.NOT_FOUND),
    (ValidationError("bad"), HTTPStatus.UNPROCESSABLE_ENTITY, ErrorCodes.VALIDATION),
    (ConfigurationError("no url"), HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.CONFIGURATION),
    (PoolExhaustedError(1.0), HTTPStatus.SERVICE_UNAVAILABLE, ErrorCodes.POOL_EXHAUSTED),
    (DatabaseConnectionError("refused"), HTTPStatus.SERVICE_UNAVAILABLE, ErrorCodes.CONNECTION),
    (DatabaseError("create", "constraint"), HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.DATABASE),
    (ApplicationError("other"), HTTPStatus.INTERNAL_SERVER_ERROR, ErrorCodes.INTERNAL),
])
def test_mapping(error, status, code):
    assert status_for(error) == status
    assert error_body(error)["error"] == code


def test_error_body_carries_message_and_details():
    body = error_body(NotFoundError("Post", "ghost"))
    assert body == {
        "error": "not_found",
        "message": "Post 'ghost' not found",
        "details": {"resource": "Post", "key": "ghost"},
    }


def test_decorator_converts_application_errors():
    @handle_api_errors("Lookup")
    def lookup():
        raise NotFoundError("Post", 3)

    with pytest.raises(HTTPException) as exc_info:
        lookup()
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail["error"] == "not_found"


def test_decorator_hides_unexpected_errors():
    @handle_api_errors("Lookup")
    def lookup():
        raise KeyError("internal detail")

    with pytest.raises(HTTPException) as exc_info:
        lookup()
    assert exc_info.value.status_code == 500
    assert "internal detail" not in exc_info.value.detail["message"]


def test_decorator_passes_http_exceptions_through():
    @handle_api_errors("Lookup")
    def lookup():
        raise HTTPException(status_code=418)

    with pytest.raises(HTTPException) as exc_info:
        lookup()
    assert exc_info.value.status_code == 418


def test_decorator_supports_coroutines():
    import asyncio

    @handle_api_errors("Lookup")
    async def lookup():
        raise PoolExhaustedError(0.5)

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(lookup())
    assert exc_info.value.status_code == 503
