"""
File Size Validation

Measures uploaded file sizes without loading entire files into memory.
"""

import logging
from typing import List

from fastapi import UploadFile

from asset_ingest.middleware.error_handler import FileTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB chunks


async def validate_file_size(file: UploadFile, max_size: int) -> int:
    """
    Validate uploaded file size without loading entire file into memory.

    Reads file in chunks to check size constraint. Resets file pointer
    to beginning after validation for subsequent processing.

    Args:
        file: FastAPI UploadFile object
        max_size: Largest accepted size in bytes (inclusive)

    Returns:
        int: Total file size in bytes

    Raises:
        FileTooLargeError: 413 if file exceeds max_size
    """
    size = 0

    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > max_size:
            logger.warning(
                f"File size exceeded for {file.filename}: "
                f"more than {max_size} bytes"
            )
            raise FileTooLargeError(file.filename, max_size)

    # Reset file pointer to beginning for subsequent reads
    await file.seek(0)

    logger.debug(f"File size validation passed for {file.filename}: {size} bytes")
    return size


async def validate_batch_sizes(files: List[UploadFile], max_size: int) -> List[int]:
    """Measure every file of a batch; the first oversized file fails the batch."""
    return [await validate_file_size(file, max_size) for file in files]
