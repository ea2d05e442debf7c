"""
OpenCV webcam capture device.
FRAMEFIT_CAMERA_INDEX (default 0) selects the webcam.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import cv2

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class OpenCVCaptureDevice:
    def __init__(self, index: int = 0, quality: int = 90) -> None:
        self._index = index
        self._quality = quality
        self._cap: cv2.VideoCapture | None = None

    def _open(self) -> None:
        if self._cap is None or not self._cap.isOpened():
            self._cap = cv2.VideoCapture(self._index)
            if not self._cap.isOpened():
                logger.warning("Failed to open camera device %s", self._index)

    def is_available(self) -> bool:
        self._open()
        return self._cap is not None and self._cap.isOpened()

    async def capture(self, target: Path) -> bool:
        return await asyncio.to_thread(self._grab, target)

    def _grab(self, target: Path) -> bool:
        self._open()
        if self._cap is None or not self._cap.isOpened():
            return False
        ret, frame = self._cap.read()
        if not ret or frame is None:
            logger.warning("Camera frame capture failed")
            return False
        if not cv2.imwrite(str(target), frame, [cv2.IMWRITE_JPEG_QUALITY, self._quality]):
            logger.warning("Could not write captured frame to %s", target)
            return False
        return True

    def release(self) -> None:
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
        self._cap = None
