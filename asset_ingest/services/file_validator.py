"""
File Validation Service

Validates declared MIME types of uploaded assets against the allow-list.
"""

import logging
from typing import Iterable, List

from fastapi import UploadFile

from asset_ingest.middleware.error_handler import InvalidFileTypeError

logger = logging.getLogger(__name__)


def normalize_mime_type(content_type: str | None) -> str:
    """Media type without parameters, in lowercase."""
    return (content_type or "").split(";")[0].strip().lower()


def validate_mime_type(file: UploadFile, allowed_mime_types: Iterable[str]) -> None:
    """
    Validate the client-declared MIME type of an upload.

    The declared Content-Type of the part, without parameters, is what
    decides acceptance; file content is not sniffed here.

    Args:
        file: FastAPI UploadFile object
        allowed_mime_types: Accepted MIME types

    Raises:
        InvalidFileTypeError: 400 if the MIME type is not allowed
    """
    if normalize_mime_type(file.content_type) not in allowed_mime_types:
        logger.warning(
            f"Invalid MIME type: {file.content_type} for file {file.filename}"
        )
        raise InvalidFileTypeError(file.filename, file.content_type)


def validate_batch_mime_types(
    files: List[UploadFile], allowed_mime_types: Iterable[str]
) -> None:
    """Validate every file of a batch; one rejected file fails the whole batch."""
    allowed = set(allowed_mime_types)
    for file in files:
        validate_mime_type(file, allowed)

    logger.info(f"MIME type validation passed for {len(files)} file(s)")


def is_raster_image(mimetype: str) -> bool:
    """Raster images are every image/* type except SVG."""
    return mimetype.startswith("image/") and mimetype != "image/svg+xml"
