"""Pydantic models for API request/response schemas."""

from .asset_metadata import AssetMetadata
from .upload_response import ErrorResponse, UploadedFile, UploadResponse

__all__ = [
    "AssetMetadata",
    "ErrorResponse",
    "UploadedFile",
    "UploadResponse",
]
