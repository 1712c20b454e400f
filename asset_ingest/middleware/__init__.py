"""FastAPI middleware and error handling for request/response processing."""

from .error_handler import (
    ErrorHandlerMiddleware,
    UploadError,
    NoFilesUploadedError,
    InvalidFileTypeError,
    FileTooLargeError,
    DiskWriteError,
    register_error_handlers,
)
from .file_size_validator import validate_batch_sizes, validate_file_size

__all__ = [
    "ErrorHandlerMiddleware",
    "UploadError",
    "NoFilesUploadedError",
    "InvalidFileTypeError",
    "FileTooLargeError",
    "DiskWriteError",
    "register_error_handlers",
    "validate_batch_sizes",
    "validate_file_size",
]
