"""Service layer for upload validation, storage and metadata extraction."""

from .file_storage import AssetStorage, StagingBatch, get_asset_storage
from .file_validator import validate_batch_mime_types, validate_mime_type
from .metadata_extractor import extract_metadata
from .thumbnails import generate_thumbnail
from .upload_processor import process_upload_batch

__all__ = [
    "AssetStorage",
    "StagingBatch",
    "get_asset_storage",
    "validate_batch_mime_types",
    "validate_mime_type",
    "extract_metadata",
    "generate_thumbnail",
    "process_upload_batch",
]
