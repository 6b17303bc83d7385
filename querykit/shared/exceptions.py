"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def payload(self) -> dict:
        """Error body rendered by the API."""
        return {"code": self.code, "message": self.message}


class UnknownIdentifier(AppException):
    """Raised when a key or field name is not a recognized identifier."""

    status_code = 400
    code = "unknown_identifier"

    def __init__(self, value: object, allowed: Iterable[str] = ()) -> None:
        self.value = value
        self.allowed = tuple(sorted(str(item) for item in allowed))
        super().__init__(f"Unknown identifier: {value!r}")

    def payload(self) -> dict:
        return {**super().payload(), "allowed": list(self.allowed)}


class InvalidParams(AppException):
    """Raised when list params cannot be normalized."""

    status_code = 400
    code = "invalid_params"


class InvalidPageParam(InvalidParams):
    """Raised when page params have an unusable shape or value."""

    code = "invalid_page_param"


class MissingPageSizeForCount(AppException):
    """Raised when page count is requested without a positive page size."""

    status_code = 500
    code = "missing_page_size"


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Render domain exceptions with their code, message and extra details."""
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.payload()})


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": "http_error", "message": str(exc.detail)}},
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "internal_error", "message": "Internal server error"}},
    )


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
