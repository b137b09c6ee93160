"""
Application errors and the handlers that render every failure as

    {"success": false, "error": "<HTTP reason phrase>", "message": "<detail>"}
"""

import uuid
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPIError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from docversions.core.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_ENDPOINT_MESSAGE = "The requested endpoint does not exist"


class DocVersionsError(Exception):
    """Base for errors that carry their own HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}


class DatabaseError(DocVersionsError):
    """The key-value store rejected or failed a request."""

    default_code = "DATABASE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class PayloadTooLargeError(DocVersionsError):
    status_code = 413
    default_code = "PAYLOAD_TOO_LARGE"

    def __init__(self, message: str, max_size: Optional[int] = None):
        super().__init__(message, details={"max_size": max_size} if max_size else None)


def create_error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": HTTPStatus(status_code).phrase,
            "message": message,
        },
    )


def _request_context(request: Request) -> Dict[str, str]:
    return {"method": request.method, "path": request.url.path}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Route-raised HTTP errors, plus the router's own 404/405."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = UNKNOWN_ENDPOINT_MESSAGE

    logger.warning("HTTP error", status_code=exc.status_code, detail=message, **_request_context(request))
    return create_error_response(exc.status_code, message)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Bad bodies and query strings become 400 with a `field: reason` list."""
    problems = [
        "{}: {}".format(
            ".".join(str(part) for part in error["loc"] if part != "body") or "body",
            error["msg"],
        )
        for error in exc.errors()
    ]
    message = "; ".join(problems) or "Invalid request"

    logger.warning("Request rejected", errors=problems, **_request_context(request))
    return create_error_response(status.HTTP_400_BAD_REQUEST, message)


async def docversions_exception_handler(
    request: Request, exc: DocVersionsError
) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application error",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        **_request_context(request),
    )
    return create_error_response(exc.status_code, exc.message)


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """SQLAlchemy, Google API and any other uncaught error: 500 with the raw message."""
    logger.error(
        "Unhandled error",
        error=str(exc),
        error_type=type(exc).__name__,
        error_id=uuid.uuid4().hex[:8],
        exc_info=True,
        **_request_context(request),
    )
    return create_error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


def setup_exception_handlers(app) -> None:
    handlers = (
        (DocVersionsError, docversions_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (RequestValidationError, validation_exception_handler),
        (SQLAlchemyError, unexpected_exception_handler),
        (GoogleAPIError, unexpected_exception_handler),
        (Exception, unexpected_exception_handler),
    )
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)
