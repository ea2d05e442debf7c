"""JPEG encoding of acquired images for upload.

Handles size validation, decoding, EXIF orientation, color space
conversion, and re-encoding at a fixed JPEG quality.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

from PIL import Image, ImageOps, UnidentifiedImageError

from framefit.errors import DecodeError

if TYPE_CHECKING:
    from framefit.config import Settings
    from framefit.domain import ImageReference

logger = logging.getLogger(__name__)

JPEG_QUALITY: int = 90


class JpegEncoder:
    """Re-encodes the image behind an ``ImageReference`` as JPEG bytes."""

    def __init__(
        self,
        quality: int = JPEG_QUALITY,
        max_image_pixels: int = 16_777_216,
        max_file_size: int = 209_715_200,
    ) -> None:
        self.quality = quality
        self.max_image_pixels = max_image_pixels
        self.max_file_size = max_file_size

    @classmethod
    def from_settings(cls, settings: Settings) -> JpegEncoder:
        return cls(
            quality=settings.jpeg_quality,
            max_image_pixels=settings.max_image_pixels,
            max_file_size=settings.max_file_size,
        )

    def encode(self, reference: ImageReference) -> bytes:
        """Load the referenced image and return it as JPEG bytes.

        Args:
            reference: Camera or gallery image reference.

        Returns:
            JPEG bytes at the configured quality.

        Raises:
            DecodeError: If the image cannot be opened or decoded, or exceeds size limits.
        """
        path = reference.resolve()
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise DecodeError(f"Cannot open {reference.locator}: {exc}") from exc
        if size > self.max_file_size:
            raise DecodeError(f"Image file too large: {size} bytes")

        try:
            with Image.open(path) as img:
                width, height = img.size
                if width * height > self.max_image_pixels:
                    raise DecodeError(f"Image too large: {width}x{height}")
                img.load()
                image = ImageOps.exif_transpose(img)
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError, SyntaxError) as exc:
            raise DecodeError(f"Cannot decode {reference.locator}: {exc}") from exc

        if image.mode != "RGB":
            image = image.convert("RGB")

        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=self.quality)
        payload = buffer.getvalue()
        logger.debug("Encoded %s (%dx%d) to %d bytes", reference.locator, width, height, len(payload))
        return payload
