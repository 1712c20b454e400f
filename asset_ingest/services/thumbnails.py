"""
Thumbnail Generation Service

Writes JPEG thumbnails for raster image uploads using Pillow.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image

from asset_ingest.services.file_validator import is_raster_image

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (255, 255, 255)


def _flatten(image: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any transparency onto a white background."""
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, BACKGROUND_COLOR)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def generate_thumbnail(
    content: bytes,
    mimetype: str,
    output_path: Path,
    max_size: int = 200,
    quality: int = 80,
) -> Optional[Path]:
    """
    Generate a JPEG thumbnail that fits inside max_size x max_size.

    Aspect ratio is preserved and smaller images are never upscaled.
    SVG, JSON and 3D formats get no thumbnail.

    Args:
        content: Raw image bytes
        mimetype: Declared MIME type
        output_path: Where to write the JPEG
        max_size: Bounding box edge in pixels
        quality: JPEG quality

    Returns:
        Path: The written thumbnail, or None when none was produced
    """
    if mimetype == "image/svg+xml":
        # No SVG rasteriser available
        return None

    if not is_raster_image(mimetype):
        return None

    try:
        with Image.open(BytesIO(content)) as image:
            # thumbnail() keeps the aspect ratio and never enlarges
            image.thumbnail((max_size, max_size))
            thumbnail = _flatten(image)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        thumbnail.save(output_path, "JPEG", quality=quality)

        logger.info(
            f"Generated thumbnail {output_path.name} "
            f"({thumbnail.width}x{thumbnail.height})"
        )
        return output_path

    except Exception as e:
        logger.error(f"Error generating thumbnail for {output_path.name}: {str(e)}")
        return None
