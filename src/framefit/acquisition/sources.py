"""Image source acquirer: camera capture and gallery selection.

Both sources end in an ``ImageReference``. The devices themselves are
platform collaborators behind the ``CaptureDevice`` and ``GalleryPicker``
protocols.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from framefit.domain import ImageOrigin, ImageReference, PendingCapture
from framefit.errors import (
    CaptureCancelled,
    CaptureFileError,
    DecodeError,
    NoCameraAvailable,
    SelectionCancelled,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
IMAGE_MIME_FILTER = "image/*"


class CaptureDevice(Protocol):
    """Protocol for camera capture handlers."""

    def is_available(self) -> bool:
        """Return True if the device can take a picture. Runs on a worker thread."""
        ...

    async def capture(self, target: Path) -> bool:
        """Capture a photo into ``target``.

        Returns:
            True when a picture was written, False when the capture was cancelled.
        """
        ...


class GalleryPicker(Protocol):
    """Protocol for image pickers."""

    async def pick(self, mime_filter: str) -> str | None:
        """Return a content handle for the chosen item, or None if cancelled."""
        ...


class ImageSourceAcquirer:
    """Obtains images from a camera or a gallery picker."""

    def __init__(
        self,
        pictures_dir: Path,
        camera: CaptureDevice | None = None,
        gallery: GalleryPicker | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._pictures_dir = pictures_dir
        self._camera = camera
        self._gallery = gallery
        self._clock = clock

    def create_image_file(self) -> PendingCapture:
        """Reserve ``JPEG_<yyyyMMdd_HHmmss>_<random>.jpg`` in the pictures directory."""
        now = self._clock()
        try:
            self._pictures_dir.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix=f"JPEG_{now.strftime(TIMESTAMP_FORMAT)}_",
                suffix=".jpg",
                dir=self._pictures_dir,
            )
            os.close(fd)
        except OSError as exc:
            logger.error("Could not create image file in %s: %s", self._pictures_dir, exc)
            raise CaptureFileError(str(exc)) from exc
        logger.debug("Reserved capture file %s", name)
        return PendingCapture(path=Path(name), created_at=now)

    async def capture_from_camera(self) -> ImageReference:
        # Opening a webcam can take seconds.
        if self._camera is None or not await asyncio.to_thread(self._camera.is_available):
            raise NoCameraAvailable("No capture handler available")

        pending = self.create_image_file()
        try:
            captured = await self._camera.capture(pending.path)
        except BaseException:
            pending.discard()
            raise

        if not captured:
            pending.discard()
            raise CaptureCancelled("Capture cancelled by user")
        if not pending.path.is_file() or pending.path.stat().st_size == 0:
            logger.warning("Camera reported success but wrote nothing to %s", pending.path)
            pending.discard()
            raise CaptureCancelled("Capture produced an empty file")

        logger.info("Captured photo %s", pending.path)
        return pending.to_reference()

    async def pick_from_gallery(self) -> ImageReference:
        if self._gallery is None:
            raise SelectionCancelled("No gallery picker configured")

        handle = await self._gallery.pick(IMAGE_MIME_FILTER)
        if handle is None:
            raise SelectionCancelled("Selection cancelled by user")

        reference = ImageReference(origin=ImageOrigin.GALLERY, locator=handle)
        path = reference.resolve()
        if not path.is_file() or path.stat().st_size == 0:
            raise DecodeError(f"Selected image is missing or empty: {handle}")

        logger.info("Selected gallery image %s", handle)
        return reference
