"""
Upload API Route

Handles the multipart batch upload endpoint for design assets.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from asset_ingest.config import settings
from asset_ingest.middleware.error_handler import (
    DiskWriteError,
    NoFilesUploadedError,
    UploadError,
)
from asset_ingest.middleware.file_size_validator import validate_batch_sizes
from asset_ingest.models.upload_response import ErrorResponse, UploadResponse
from asset_ingest.services.file_storage import AssetStorage, get_asset_storage
from asset_ingest.services.file_validator import validate_batch_mime_types
from asset_ingest.services.upload_processor import process_upload_batch

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_client_metadata(
    request: Request, indices: List[int]
) -> List[Dict[str, Any]]:
    """
    Collect the optional `metadata_<index>` JSON fields sent alongside files.

    `indices` are the positions of the kept files among all submitted
    `files` parts, so each entry pairs with the part the client numbered.

    These are informational only; malformed values are logged and ignored.
    """
    form = await request.form()
    client_metadata = []
    for index in indices:
        raw = form.get(f"metadata_{index}")
        parsed: Dict[str, Any] = {}
        if isinstance(raw, str) and raw:
            try:
                value = json.loads(raw)
                if isinstance(value, dict):
                    parsed = value
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed metadata_{index} field")
        client_metadata.append(parsed)
    return client_metadata


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    summary="Upload Design Assets",
    description="""
Upload a batch of design assets (icons, illustrations, images, Lottie animations, 3D models).

**Constraints:**
- **Max File Size:** 10MB per file
- **Accepted Types:** SVG, PNG, JPEG, WebP, JSON (Lottie), glTF (JSON and binary), octet-stream (OBJ/FBX/GLB)
- **All or nothing:** one invalid file rejects the whole batch

**Response:** A manifest with the stored filename, public URL, extracted metadata
and, for raster images, a thumbnail URL per file.
""",
    responses={
        400: {"model": ErrorResponse, "description": "No files uploaded or invalid file type"},
        405: {"model": ErrorResponse, "description": "Method not allowed"},
        413: {"model": ErrorResponse, "description": "File too large (max 10MB)"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def upload_assets(
    request: Request,
    files: Optional[List[UploadFile]] = File(default=None),
    storage: AssetStorage = Depends(get_asset_storage),
) -> UploadResponse:
    """
    Validate, store and describe a batch of uploaded assets.

    Args:
        files: Uploaded files from the repeated `files` field (multipart/form-data)

    Returns:
        UploadResponse: Manifest of processed files

    Raises:
        UploadError: For missing files, rejected types, oversized files or storage failures
    """
    # Browsers send a nameless part when no file was picked
    kept = [(index, file) for index, file in enumerate(files or []) if file.filename]
    if not kept:
        raise NoFilesUploadedError()
    indices = [index for index, _ in kept]
    files = [file for _, file in kept]

    logger.info(f"Upload started: {len(files)} file(s)")

    # Whole-batch validation before anything touches disk
    validate_batch_mime_types(files, settings.ALLOWED_MIME_TYPES)
    await validate_batch_sizes(files, settings.MAX_UPLOAD_SIZE)

    client_metadata = await read_client_metadata(request, indices)

    try:
        processed = await process_upload_batch(files, storage, client_metadata)

    except UploadError:
        raise
    except OSError as e:
        logger.error(f"Filesystem error during upload: {str(e)}")
        raise DiskWriteError(str(storage.upload_path), str(e))

    logger.info(f"Upload successful: {len(processed)} file(s)")

    return UploadResponse(
        success=True,
        message=f"{len(processed)} files uploaded",
        files=processed,
    )
