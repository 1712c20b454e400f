"""
Upload Processing Service

Turns a validated batch of uploads into manifest entries: stage each file,
extract metadata, write thumbnails, then commit the whole batch at once.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import UploadFile

from asset_ingest.config import settings
from asset_ingest.models.upload_response import UploadedFile
from asset_ingest.services.file_storage import AssetStorage, generate_file_id
from asset_ingest.services.file_validator import is_raster_image, normalize_mime_type
from asset_ingest.services.metadata_extractor import extract_metadata
from asset_ingest.services.thumbnails import generate_thumbnail

logger = logging.getLogger(__name__)


async def process_upload_batch(
    files: List[UploadFile],
    storage: AssetStorage,
    client_metadata: Optional[List[Dict[str, Any]]] = None,
) -> List[UploadedFile]:
    """
    Store and describe a batch of already-validated uploads.

    Files are handled one at a time in upload order. The batch is written to
    staging and only moved into the content directory once every file has
    been processed, so a failure leaves no partial batch behind.

    Args:
        files: Uploads that passed MIME type and size validation
        storage: Target asset storage
        client_metadata: Optional client-declared info per file index

    Returns:
        List[UploadedFile]: Manifest entries in upload order

    Raises:
        DiskWriteError: If staging or committing files fails
    """
    client_metadata = client_metadata or []
    storage.ensure_directories()

    staged = []
    with storage.stage_batch() as batch:
        for index, file in enumerate(files):
            original_name = file.filename or ""
            mimetype = normalize_mime_type(file.content_type)
            declared = client_metadata[index] if index < len(client_metadata) else {}
            if declared:
                logger.debug(f"Client metadata for {original_name}: {declared}")

            content = await file.read()
            filename = batch.reserve_filename(original_name)
            batch.write(filename, content)

            metadata = extract_metadata(content, mimetype)

            if is_raster_image(mimetype):
                thumbnail = generate_thumbnail(
                    content,
                    mimetype,
                    batch.thumbnail_path(filename),
                    max_size=settings.THUMBNAIL_MAX_SIZE,
                    quality=settings.THUMBNAIL_QUALITY,
                )
                if thumbnail:
                    batch.add_thumbnail(filename, thumbnail)

            staged.append((original_name, filename, mimetype, len(content), metadata))
            logger.info(f"Processed file: {original_name} -> {filename}")

        batch.commit()

        return [
            UploadedFile(
                id=generate_file_id(),
                original_name=original_name,
                filename=filename,
                mimetype=mimetype,
                size=size,
                path=str(storage.file_path(filename)),
                url=storage.file_url(filename),
                metadata=metadata,
                thumbnail_url=storage.committed_thumbnail_url(batch, filename),
            )
            for original_name, filename, mimetype, size, metadata in staged
        ]
