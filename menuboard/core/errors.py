"""
API error taxonomy and the handlers that render every failure as
``{"error": ..., "message"?: ...}``.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from menuboard.core.config import get_settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors raised deliberately by route handlers and services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(self, error: Optional[str] = None, message: Optional[str] = None):
        self.error = error or self.error
        self.message = message
        super().__init__(self.error)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        return body


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"


class Unauthenticated(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Authentication required"


class AccessDenied(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Access denied"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class DuplicateCode(Conflict):
    """Two displays raced for the same pairing code; the store's unique index rejected one."""
    error = "Pairing code already in use"


class CodeSpaceExhausted(Conflict):
    """No unused pairing code was found within the allowed number of attempts."""
    error = "Could not generate a unique pairing code"


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies, path ids and query params all map to 400."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Validation failed",
            "details": jsonable_encoder(exc.errors(), exclude={"ctx", "input", "url"}),
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    """Handle unexpected server errors with structured response."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    content = {"error": "Internal server error"}
    if get_settings().DEBUG:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
