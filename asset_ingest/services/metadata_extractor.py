"""
Metadata Extraction Service

Extracts lightweight metadata from uploaded assets, dispatching on the
declared MIME type:

- image/svg+xml: dimensions parsed from the root <svg> tag
- other image/*: read with Pillow
- application/json: Lottie structural fields, or plain "json"
- anything else (glTF, GLB, OBJ, FBX): nothing

Extraction never fails an upload; errors degrade to empty metadata.
"""

import json
import logging
import math
import re
from io import BytesIO
from typing import Any, Optional, Union

from PIL import Image

from asset_ingest.models.asset_metadata import AssetMetadata

logger = logging.getLogger(__name__)

Number = Union[int, float]

SVG_ROOT_PATTERN = re.compile(r"<svg\b[^>]*>", re.IGNORECASE | re.DOTALL)
LEADING_NUMBER_PATTERN = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

# Pillow image mode -> colour space name
COLOR_SPACES = {
    "1": "b-w",
    "L": "b-w",
    "LA": "b-w",
    "I": "b-w",
    "I;16": "b-w",
    "F": "b-w",
    "P": "srgb",
    "PA": "srgb",
    "RGB": "srgb",
    "RGBA": "srgb",
    "RGBX": "srgb",
    "RGBa": "srgb",
    "YCbCr": "srgb",
    "CMYK": "cmyk",
    "LAB": "lab",
    "HSV": "hsv",
}


def _attribute(tag: str, name: str) -> Optional[str]:
    # (?<![\w-]) keeps "width" from matching "stroke-width"
    match = re.search(
        rf"(?<![\w-]){name}\s*=\s*(?:\"([^\"]*)\"|'([^']*)')",
        tag,
    )
    if not match:
        return None
    return match.group(1) if match.group(1) is not None else match.group(2)


def _to_number(value: float) -> Number:
    return int(value) if value.is_integer() else value


def _leading_number(text: str) -> Optional[Number]:
    match = LEADING_NUMBER_PATTERN.match(text)
    if not match:
        return None
    value = float(match.group(1))
    return _to_number(value) if math.isfinite(value) else None


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and (isinstance(value, int) or math.isfinite(value))
    )


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"JSON number out of range: {text}")
    return value


def parse_svg_dimensions(svg_text: str) -> tuple[Number, Number]:
    """
    Read width/height from the root <svg> tag.

    The viewBox wins; its third and fourth components are the dimensions.
    Otherwise both explicit width and height attributes are used (unit
    suffixes such as "px" are ignored). Anything else yields (0, 0).
    """
    root = SVG_ROOT_PATTERN.search(svg_text)
    if not root:
        return 0, 0
    tag = root.group(0)

    view_box = _attribute(tag, "viewBox")
    if view_box:
        parts = [p for p in re.split(r"[\s,]+", view_box.strip()) if p]
        if len(parts) >= 4:
            try:
                width, height = float(parts[2]), float(parts[3])
            except ValueError:
                width = height = math.nan
            if math.isfinite(width) and math.isfinite(height):
                return _to_number(width), _to_number(height)
            logger.debug(f"Unparseable viewBox: {view_box!r}")

    width = _attribute(tag, "width")
    height = _attribute(tag, "height")
    if width is not None and height is not None:
        parsed_width = _leading_number(width)
        parsed_height = _leading_number(height)
        if parsed_width is not None and parsed_height is not None:
            return parsed_width, parsed_height

    return 0, 0


def extract_svg_metadata(content: bytes) -> AssetMetadata:
    width, height = parse_svg_dimensions(content.decode("utf-8", errors="replace"))
    return AssetMetadata(
        format="svg",
        width=width,
        height=height,
        channels=4,
        has_alpha=True,
    )


def extract_image_metadata(content: bytes, mimetype: str) -> AssetMetadata:
    """Read intrinsic properties of a raster image with Pillow."""
    with Image.open(BytesIO(content)) as image:
        sniffed = Image.MIME.get(image.format or "")
        if sniffed and sniffed != mimetype:
            logger.warning(
                f"Declared MIME type {mimetype} does not match content ({sniffed})"
            )

        bands = image.getbands()
        has_alpha = "A" in bands or "a" in bands or "transparency" in image.info

        return AssetMetadata(
            format=image.format.lower() if image.format else None,
            width=image.width,
            height=image.height,
            color_space=COLOR_SPACES.get(image.mode, image.mode.lower()),
            channels=len(bands),
            has_alpha=has_alpha,
        )


def is_lottie(data: Any) -> bool:
    """A Lottie animation has a version `v`, a frame rate `fr` and a `layers` list."""
    return (
        isinstance(data, dict)
        and bool(data.get("v"))
        and _is_number(data.get("fr"))
        and data["fr"] > 0
        and isinstance(data.get("layers"), list)
    )


def extract_json_metadata(content: bytes) -> AssetMetadata:
    # NaN and Infinity are not JSON and would not survive serialization
    data = json.loads(
        content.decode("utf-8-sig"),
        parse_constant=_reject_constant,
        parse_float=_finite_float,
    )

    if not is_lottie(data):
        return AssetMetadata(format="json")

    frame_rate = data["fr"]
    out_point = data.get("op")
    return AssetMetadata(
        format="lottie",
        version=data["v"],
        frame_rate=frame_rate,
        duration_seconds=out_point / frame_rate if _is_number(out_point) else None,
        width=data.get("w") if _is_number(data.get("w")) else None,
        height=data.get("h") if _is_number(data.get("h")) else None,
    )


def extract_metadata(content: bytes, mimetype: str) -> AssetMetadata:
    """
    Extract metadata for an uploaded file based on its declared MIME type.

    Args:
        content: Raw file bytes
        mimetype: Client-declared MIME type (already allow-listed)

    Returns:
        AssetMetadata: Extracted metadata, empty for unsupported types or on failure
    """
    try:
        if mimetype == "image/svg+xml":
            return extract_svg_metadata(content)
        if mimetype.startswith("image/"):
            return extract_image_metadata(content, mimetype)
        if mimetype == "application/json":
            return extract_json_metadata(content)
    except Exception as e:
        logger.error(f"Metadata extraction failed for {mimetype}: {str(e)}")
        return AssetMetadata()

    # glTF, GLB and other 3D formats pass through without metadata
    return AssetMetadata()
