"""
Centralized error handling for FastAPI.

Provides consistent `{"error": ...}` responses and logging for all API routes.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Reason strings for framework-level HTTP errors
HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


class UploadError(Exception):
    """Base exception for upload-related errors."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NoFilesUploadedError(UploadError):
    """Raised when a request carries no file parts."""

    def __init__(self):
        super().__init__(message="No files uploaded", status_code=400)


class InvalidFileTypeError(UploadError):
    """Raised when a declared MIME type is outside the allow-list."""

    def __init__(self, filename: str | None, mimetype: str | None):
        super().__init__(
            message="Invalid file type",
            status_code=400,
            details={"filename": filename, "mimetype": mimetype},
        )


class FileTooLargeError(UploadError):
    """Raised when a file exceeds the per-file size ceiling."""

    def __init__(self, filename: str | None, max_size: int):
        super().__init__(
            message="File too large",
            status_code=413,
            details={"filename": filename, "max_size": max_size},
        )


class DiskWriteError(UploadError):
    """Raised when file write operations fail."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            message="Internal server error",
            status_code=500,
            details={"path": path, "reason": reason},
        )


async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"UploadError: {exc.message}", extra={"details": exc.details})
    else:
        logger.warning(f"Upload rejected: {exc.message} {exc.details or ''}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """A `files` field that is present but holds no file parts counts as no upload."""
    if any("files" in error.get("loc", ()) for error in exc.errors()):
        message = "No files uploaded"
    else:
        message = "Invalid request"
    logger.warning(f"Request validation failed: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": message})


def register_error_handlers(app: FastAPI) -> None:
    """Attach the exception handlers to the application."""
    app.add_exception_handler(UploadError, upload_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response

        except Exception as e:
            # Log full stack trace for unexpected errors
            logger.exception(f"Unhandled exception: {str(e)}")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
            )
