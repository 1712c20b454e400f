"""
Application configuration using Pydantic Settings.

All environment variables are accessed through this config object.
Never use os.getenv() directly in business logic.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application Configuration
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root logging level",
    )

    # Upload Configuration
    MAX_UPLOAD_SIZE: int = Field(
        default=10485760,
        description="Maximum size of a single uploaded file in bytes (10MB)",
    )
    ALLOWED_MIME_TYPES: List[str] = Field(
        default=[
            "image/svg+xml",
            "image/png",
            "image/jpeg",
            "image/webp",
            "application/json",
            "model/gltf+json",
            "model/gltf-binary",
            "application/octet-stream",
        ],
        description="Declared MIME types accepted for upload",
    )

    # Storage Configuration
    UPLOAD_DIR: str = Field(
        default="public/uploads",
        description="Directory uploaded assets are written to",
    )
    UPLOAD_URL_PREFIX: str = Field(
        default="/uploads",
        description="Public URL prefix the upload directory is served under",
    )
    THUMBNAIL_DIRNAME: str = Field(
        default="thumbnails",
        description="Thumbnail subdirectory inside UPLOAD_DIR",
    )

    # Thumbnail Configuration
    THUMBNAIL_MAX_SIZE: int = Field(
        default=200,
        description="Thumbnails fit inside a square of this many pixels",
    )
    THUMBNAIL_QUALITY: int = Field(
        default=80,
        description="JPEG quality for thumbnails",
    )

    # Expiry Configuration
    UPLOAD_TTL_HOURS: Optional[int] = Field(
        default=None,
        description="Delete uploads older than this many hours (unset keeps them forever)",
    )
    CLEANUP_INTERVAL_HOURS: int = Field(
        default=1,
        description="Interval between expiry sweeps in hours",
    )


# Global settings instance
settings = Settings()
