"""
Upload Response Pydantic Models

Defines the manifest returned for a successful upload batch.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .asset_metadata import AssetMetadata


class UploadedFile(BaseModel):
    """One processed file in the upload manifest."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        ...,
        description="Request-scoped identifier (timestamp + random suffix)"
    )
    original_name: str = Field(
        ...,
        alias="originalName",
        description="Client-supplied filename (untrusted)"
    )
    filename: str = Field(
        ...,
        description="Generated on-disk filename, also the public URL segment"
    )
    mimetype: str = Field(
        ...,
        description="Declared MIME type"
    )
    size: int = Field(
        ...,
        description="File size in bytes"
    )
    path: str = Field(
        ...,
        description="Server path of the stored file"
    )
    url: str = Field(
        ...,
        description="Public URL of the stored file"
    )
    metadata: AssetMetadata = Field(
        default_factory=AssetMetadata,
        description="Extracted metadata, empty when nothing could be extracted"
    )
    thumbnail_url: Optional[str] = Field(
        default=None,
        alias="thumbnailUrl",
        description="Public URL of the JPEG thumbnail (raster images only)"
    )


class UploadResponse(BaseModel):
    """
    Response model for a successful upload batch.

    Returned by POST /api/upload after every file was validated and stored.
    """

    success: bool = Field(
        default=True,
        description="Always true for a 200 response"
    )
    message: str = Field(
        ...,
        description="Summary message, e.g. '3 files uploaded'"
    )
    files: List[UploadedFile] = Field(
        ...,
        description="Manifest of processed files, in upload order"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": True,
                "message": "1 files uploaded",
                "files": [
                    {
                        "id": "1718000000000-k3j9x2a8p1",
                        "originalName": "logo.png",
                        "filename": "logo_1718000000000_a8f3k2.png",
                        "mimetype": "image/png",
                        "size": 24576,
                        "path": "public/uploads/logo_1718000000000_a8f3k2.png",
                        "url": "/uploads/logo_1718000000000_a8f3k2.png",
                        "metadata": {
                            "format": "png",
                            "width": 512,
                            "height": 512,
                            "colorSpace": "srgb",
                            "channels": 4,
                            "hasAlpha": True,
                        },
                        "thumbnailUrl": "/uploads/thumbnails/logo_1718000000000_a8f3k2.jpg",
                    }
                ],
            }
        }
    }


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str = Field(..., description="Short machine-readable reason")
