"""Value objects shared by the acquisition, analysis, and workflow layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from framefit.errors import DecodeError

logger = logging.getLogger(__name__)


class ImageOrigin(StrEnum):
    CAMERA = "camera"
    GALLERY = "gallery"


class Capability(StrEnum):
    CAMERA_ACCESS = "camera_access"
    GALLERY_ACCESS = "gallery_access"


class PermissionStatus(StrEnum):
    GRANTED = "granted"
    DENIED = "denied"


class FrameAsset(StrEnum):
    """Recommended eyeglass frame shapes.

    ``DEFAULT`` is the placeholder shown with a new photo until its analysis
    completes.
    """

    OVAL = "oval"
    ROUND = "round"
    SQUARE = "square"
    DEFAULT = "default"


class AnalysisState(StrEnum):
    IDLE = "idle"
    AWAITING_ENCODE = "awaiting_encode"
    AWAITING_UPLOAD = "awaiting_upload"
    AWAITING_PARSE = "awaiting_parse"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ImageReference:
    """Handle to the bytes of an acquired image.

    Camera captures carry a filesystem path, gallery selections carry a
    ``file://`` content handle.
    """

    origin: ImageOrigin
    locator: str

    def resolve(self) -> Path:
        """Return the local file behind the locator.

        Raises:
            DecodeError: If the handle uses a scheme that cannot be opened locally.
        """
        parsed = urlparse(self.locator)
        if parsed.scheme == "file":
            return Path(url2pathname(parsed.path))
        if parsed.scheme and len(parsed.scheme) > 1:
            raise DecodeError(f"Unsupported image handle: {self.locator}")
        # Plain paths (including Windows drive letters, which parse as a 1-char scheme).
        return Path(self.locator)


@dataclass(frozen=True)
class PendingCapture:
    """Target file reserved for a camera capture that has not completed yet."""

    path: Path
    created_at: datetime = field(default_factory=datetime.now)

    def to_reference(self) -> ImageReference:
        return ImageReference(origin=ImageOrigin.CAMERA, locator=str(self.path))

    def discard(self) -> None:
        """Remove the reserved file, if it still exists."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove abandoned capture file %s", self.path, exc_info=True)
        else:
            logger.info(
                "Discarded capture %s (reserved at %s)",
                self.path,
                self.created_at.isoformat(timespec="seconds"),
            )


@dataclass(frozen=True)
class AnalysisResult:
    """Frame type label returned by the inference endpoint and its mapped asset."""

    frame_type: str
    asset: FrameAsset
