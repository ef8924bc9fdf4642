"""
Exception handlers for the CMS i18n API

Every error leaves the API in one envelope:

{
    "error": {
        "status_code": 404,
        "error_code": "RESOURCE_CONTENT_GROUP_NOT_FOUND",
        "message": "Content group with id '12' not found",
        "type": "Not Found",
        "details": {"resource_type": "Content group", "resource_id": 12},
        "path": "/api/v1/articles/content/12"
    }
}
"""

import logging
from typing import Any, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cms_i18n.exceptions import CMSError, ErrorCode

logger = logging.getLogger(__name__)

ERROR_TYPES = {
    400: "Bad Request",
    404: "Not Found",
    409: "Conflict",
    422: "Validation Error",
    500: "Internal Server Error",
    503: "Service Unavailable",
}

HTTP_ERROR_CODES = {
    400: ErrorCode.VALIDATION_FAILED,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    422: ErrorCode.VALIDATION_FAILED,
    500: ErrorCode.INTERNAL_ERROR,
}


def get_error_type(status_code: int) -> str:
    return ERROR_TYPES.get(status_code, "Error")


def get_http_error_code(status_code: int) -> str:
    return HTTP_ERROR_CODES.get(status_code, ErrorCode.UNKNOWN_ERROR).value


def create_error_response(
    status_code: int,
    message: str,
    error_code: str | ErrorCode | None = None,
    details: dict[str, Any] | None = None,
    path: str | None = None,
) -> JSONResponse:
    """Build the error envelope; empty ``error_code``, ``details`` and ``path`` are left out."""
    error: dict[str, Any] = {
        "status_code": status_code,
        "message": message,
        "type": get_error_type(status_code),
    }
    if error_code:
        error["error_code"] = error_code.value if isinstance(error_code, ErrorCode) else error_code
    if details:
        error["details"] = details
    if path:
        error["path"] = path
    return JSONResponse(status_code=status_code, content={"error": error})


async def cms_exception_handler(request: Request, exc: CMSError) -> JSONResponse:
    # 4xx at warning, 5xx at error
    log = logger.error if exc.status_code >= 500 else logger.warning
    log("%s %s: %s", exc.error_code.value, request.url.path, exc.message, extra={"details": exc.details})
    return create_error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.error_code,
        details=exc.details or None,
        path=request.url.path,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning("HTTP %s on %s: %s", exc.status_code, request.url.path, exc.detail)
    return create_error_response(
        status_code=exc.status_code,
        message=str(exc.detail),
        error_code=get_http_error_code(exc.status_code),
        path=request.url.path,
    )


async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, PydanticValidationError]
) -> JSONResponse:
    """Flatten pydantic errors to ``{field, message, type}`` entries."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Validation error on %s: %s", request.url.path, errors)
    return create_error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        message="Validation error",
        error_code=ErrorCode.VALIDATION_FAILED,
        details={"validation_errors": errors},
        path=request.url.path,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return create_error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        message="An unexpected error occurred. Please try again later.",
        error_code=ErrorCode.INTERNAL_ERROR,
        path=request.url.path,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CMSError, cms_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    logger.debug("Exception handlers registered")
