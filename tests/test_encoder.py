"""Tests for JPEG encoding of acquired images."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from framefit.domain import ImageOrigin, ImageReference
from framefit.errors import DecodeError
from framefit.imaging.encoder import JPEG_QUALITY, JpegEncoder

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_png(path: Path, size: tuple[int, int] = (64, 48), mode: str = "RGBA") -> Path:
    color = (200, 120, 40, 255) if mode == "RGBA" else (200, 120, 40)
    Image.new(mode, size, color).save(path, format="PNG")
    return path


def _camera_ref(path: Path) -> ImageReference:
    return ImageReference(origin=ImageOrigin.CAMERA, locator=str(path))


def _gallery_ref(path: Path) -> ImageReference:
    return ImageReference(origin=ImageOrigin.GALLERY, locator=path.as_uri())


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class TestJpegEncoder:
    def test_default_quality_is_90(self) -> None:
        assert JPEG_QUALITY == 90
        assert JpegEncoder().quality == 90

    def test_encodes_png_as_rgb_jpeg(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "face.png")

        payload = JpegEncoder().encode(_camera_ref(source))

        assert payload.startswith(b"\xff\xd8")
        with Image.open(io.BytesIO(payload)) as decoded:
            assert decoded.format == "JPEG"
            assert decoded.mode == "RGB"
            assert decoded.size == (64, 48)

    def test_matches_pillow_at_quality_90(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "face.png", mode="RGB")
        expected = io.BytesIO()
        with Image.open(source) as img:
            img.convert("RGB").save(expected, format="JPEG", quality=90)

        assert JpegEncoder().encode(_camera_ref(source)) == expected.getvalue()

    def test_encoding_is_idempotent(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "face.png")
        encoder = JpegEncoder()

        assert encoder.encode(_camera_ref(source)) == encoder.encode(_camera_ref(source))

    def test_gallery_file_uri_is_resolved(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "picked.png")
        assert JpegEncoder().encode(_gallery_ref(source))

    def test_applies_exif_orientation(self, tmp_path: Path) -> None:
        source = tmp_path / "rotated.jpg"
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 degrees clockwise on display
        Image.new("RGB", (40, 20), (10, 20, 30)).save(source, format="JPEG", exif=exif)

        payload = JpegEncoder().encode(_camera_ref(source))

        with Image.open(io.BytesIO(payload)) as decoded:
            assert decoded.size == (20, 40)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestJpegEncoderErrors:
    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DecodeError):
            JpegEncoder().encode(_camera_ref(tmp_path / "gone.jpg"))

    def test_corrupted_file(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.jpg"
        source.write_bytes(b"definitely not an image")

        with pytest.raises(DecodeError, match="Cannot decode"):
            JpegEncoder().encode(_camera_ref(source))

    def test_too_many_pixels(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "big.png", size=(20, 20))

        with pytest.raises(DecodeError, match="too large"):
            JpegEncoder(max_image_pixels=100).encode(_camera_ref(source))

    def test_file_too_large(self, tmp_path: Path) -> None:
        source = _write_png(tmp_path / "heavy.png")

        with pytest.raises(DecodeError, match="too large"):
            JpegEncoder(max_file_size=10).encode(_camera_ref(source))

    def test_unsupported_content_handle(self) -> None:
        reference = ImageReference(origin=ImageOrigin.GALLERY, locator="content://media/external/images/1")

        with pytest.raises(DecodeError, match="Unsupported"):
            JpegEncoder().encode(reference)
