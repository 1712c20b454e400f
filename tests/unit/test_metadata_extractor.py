"""
Unit Tests for Metadata Extraction

Tests SVG, raster, Lottie and pass-through dispatch in isolation.
"""

import json

import pytest

from asset_ingest.services.metadata_extractor import (
    extract_json_metadata,
    extract_metadata,
    is_lottie,
    parse_svg_dimensions,
)


class TestSvgDimensions:
    """Tests for parse_svg_dimensions."""

    def test_viewbox_gives_dimensions(self):
        assert parse_svg_dimensions('<svg viewBox="0 0 64 48"></svg>') == (64, 48)

    def test_viewbox_wins_over_attributes(self):
        svg = '<svg width="10" height="20" viewBox="0 0 64 48"></svg>'
        assert parse_svg_dimensions(svg) == (64, 48)

    def test_viewbox_with_commas_and_decimals(self):
        assert parse_svg_dimensions("<svg viewBox='0,0,24.5,12'></svg>") == (24.5, 12)

    def test_width_height_fallback_ignores_units(self):
        svg = '<svg xmlns="http://www.w3.org/2000/svg" width="120px" height="80"></svg>'
        assert parse_svg_dimensions(svg) == (120, 80)

    def test_stroke_width_is_not_width(self):
        svg = '<svg stroke-width="3" height="80"><rect width="5"/></svg>'
        assert parse_svg_dimensions(svg) == (0, 0)

    def test_nested_elements_are_ignored(self):
        svg = '<svg><symbol viewBox="0 0 10 10"/><rect width="5" height="5"/></svg>'
        assert parse_svg_dimensions(svg) == (0, 0)

    def test_not_an_svg(self):
        assert parse_svg_dimensions("hello") == (0, 0)

    def test_non_finite_viewbox_falls_back_to_attributes(self):
        svg = '<svg viewBox="0 0 inf nan" width="32" height="16"></svg>'
        assert parse_svg_dimensions(svg) == (32, 16)

    def test_overflowing_width_is_ignored(self):
        assert parse_svg_dimensions('<svg width="1e999" height="10"></svg>') == (0, 0)


class TestExtractMetadata:
    """Tests for extract_metadata dispatch."""

    def test_svg_metadata(self, svg_bytes):
        metadata = extract_metadata(svg_bytes, "image/svg+xml")

        assert metadata.model_dump(by_alias=True, exclude_none=True) == {
            "format": "svg",
            "width": 64,
            "height": 48,
            "channels": 4,
            "hasAlpha": True,
        }

    @pytest.mark.parametrize(
        "fmt,mimetype,mode,expected_format,channels,has_alpha",
        [
            ("PNG", "image/png", "RGBA", "png", 4, True),
            ("JPEG", "image/jpeg", "RGB", "jpeg", 3, False),
            ("PNG", "image/png", "L", "png", 1, False),
        ],
    )
    def test_raster_metadata(
        self, image_factory, fmt, mimetype, mode, expected_format, channels, has_alpha
    ):
        color = 128 if mode == "L" else (10, 20, 30)
        content = image_factory(size=(320, 240), fmt=fmt, mode=mode, color=color)

        metadata = extract_metadata(content, mimetype)

        assert metadata.format == expected_format
        assert (metadata.width, metadata.height) == (320, 240)
        assert metadata.channels == channels
        assert metadata.has_alpha is has_alpha
        assert metadata.color_space == ("b-w" if mode == "L" else "srgb")

    def test_mismatched_declared_type_still_reads_image(self, image_factory):
        content = image_factory(size=(10, 10), fmt="PNG")

        metadata = extract_metadata(content, "image/jpeg")

        assert metadata.format == "png"

    def test_corrupt_image_degrades_to_empty(self):
        assert extract_metadata(b"not an image", "image/png").is_empty()

    def test_lottie_metadata(self, lottie_bytes):
        metadata = extract_metadata(lottie_bytes, "application/json")

        assert metadata.model_dump(by_alias=True, exclude_none=True) == {
            "format": "lottie",
            "version": 5.5,
            "frameRate": 30,
            "durationSeconds": 3.0,
            "width": 500,
            "height": 500,
        }

    def test_plain_json(self):
        metadata = extract_metadata(b'{"name": "tokens"}', "application/json")

        assert metadata.model_dump(by_alias=True, exclude_none=True) == {"format": "json"}
        assert metadata.frame_rate is None
        assert metadata.duration_seconds is None

    def test_malformed_json_degrades_to_empty(self):
        assert extract_metadata(b'{"v": 5', "application/json").is_empty()

    @pytest.mark.parametrize(
        "content",
        [
            b'{"v": 5.5, "fr": 30, "op": 90, "layers": [], "w": NaN}',
            b'{"v": 5.5, "fr": Infinity, "layers": []}',
            b'{"v": 1e999, "fr": 30, "layers": []}',
        ],
    )
    def test_non_finite_numbers_degrade_to_empty(self, content):
        metadata = extract_metadata(content, "application/json")

        assert metadata.is_empty()
        json.dumps(metadata.model_dump(by_alias=True, exclude_none=True), allow_nan=False)

    @pytest.mark.parametrize(
        "mimetype",
        ["model/gltf+json", "model/gltf-binary", "application/octet-stream"],
    )
    def test_3d_formats_pass_through(self, mimetype):
        content = b'{"asset": {"version": "2.0"}}'
        assert extract_metadata(content, mimetype).is_empty()


class TestLottieDetection:
    """Tests for Lottie identification and duration."""

    def test_string_version_is_lottie(self):
        data = {"v": "5.7.4", "fr": 24, "op": 48, "layers": []}
        assert is_lottie(data)

        metadata = extract_json_metadata(json.dumps(data).encode())
        assert metadata.version == "5.7.4"
        assert metadata.duration_seconds == 2.0

    @pytest.mark.parametrize(
        "data",
        [
            {"fr": 30, "layers": []},
            {"v": "5.5", "layers": []},
            {"v": "5.5", "fr": 0, "layers": []},
            {"v": "5.5", "fr": "30", "layers": []},
            {"v": "5.5", "fr": 30, "layers": {}},
            [1, 2, 3],
        ],
    )
    def test_not_lottie(self, data):
        assert not is_lottie(data)
        assert extract_json_metadata(json.dumps(data).encode()).format == "json"

    def test_missing_out_point_omits_duration(self):
        data = {"v": "5.5", "fr": 30, "layers": [], "w": 100, "h": 50}

        metadata = extract_json_metadata(json.dumps(data).encode())

        assert metadata.format == "lottie"
        assert metadata.duration_seconds is None
        assert (metadata.width, metadata.height) == (100, 50)
