"""
Asset Metadata Pydantic Model

Per-file metadata extracted during upload. Which fields are set depends on
the asset kind; unset fields are left out of the serialized manifest.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class AssetMetadata(BaseModel):
    """
    Metadata extracted from an uploaded asset.

    - Raster image: format, width, height, colorSpace, channels, hasAlpha
    - SVG: format "svg", width, height, channels 4, hasAlpha true
    - Lottie: format "lottie", version, frameRate, durationSeconds, width, height
    - Other JSON: format "json"
    - Anything else: empty
    """

    model_config = ConfigDict(populate_by_name=True)

    format: Optional[str] = Field(
        default=None,
        description="Detected asset format (png, jpeg, webp, svg, lottie, json)",
    )
    width: Optional[Number] = Field(default=None, description="Intrinsic width")
    height: Optional[Number] = Field(default=None, description="Intrinsic height")
    color_space: Optional[str] = Field(
        default=None,
        alias="colorSpace",
        description="Colour space of a raster image (srgb, b-w, cmyk, ...)",
    )
    channels: Optional[int] = Field(default=None, description="Number of colour channels")
    has_alpha: Optional[bool] = Field(
        default=None,
        alias="hasAlpha",
        description="Whether the image carries an alpha channel",
    )
    version: Optional[Union[str, Number]] = Field(
        default=None,
        description="Lottie format version (the `v` field)",
    )
    frame_rate: Optional[Number] = Field(
        default=None,
        alias="frameRate",
        description="Lottie frames per second",
    )
    duration_seconds: Optional[float] = Field(
        default=None,
        alias="durationSeconds",
        description="Lottie duration: out-point divided by frame rate",
    )

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)
