"""API error kinds and the exception handlers that render them."""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.schemas.errors import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base for errors that map to a specific HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: list[ErrorDetail] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class ValidationFailed(ApiError):
    """Malformed or unacceptable input (400)."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ApiError):
    """Referenced user does not exist (404)."""

    status_code = status.HTTP_404_NOT_FOUND


class Unauthenticated(ApiError):
    """Request needs credentials and has none valid (401)."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class Forbidden(ApiError):
    """Caller is authenticated but lacks the required role (403)."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


def error_body(status_code: int, message: str, errors: list[ErrorDetail] | None = None) -> dict[str, Any]:
    """Serialise the error envelope shared by every non-2xx response."""
    body = ErrorResponse(
        status_code=status_code,
        message=message,
        timestamp=datetime.now(UTC),
        errors=errors or [],
    )
    return jsonable_encoder(body)


def _challenge_headers() -> dict[str, str]:
    realm = get_settings().AUTH_REALM
    return {"WWW-Authenticate": f'Basic realm="{realm}"'}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    headers = _challenge_headers() if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.errors),
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        ErrorDetail(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            message=err.get("msg", "Invalid value"),
        )
        for err in exc.errors()
    ]
    logger.info(
        "Validation failed: method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        len(errors),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(status.HTTP_400_BAD_REQUEST, "Validation failed", errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised errors (unknown route, wrong method, malformed Basic header)."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message),
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers so every error leaves the API in the same envelope."""
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
