"""Error taxonomy for the photo workflow.

Every failure the workflow can recover from derives from ``FrameFitError``
and carries a kind plus a short notice suitable for showing to the user.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    PERMISSION_DENIED = "permission_denied"
    CAPTURE_CANCELLED = "capture_cancelled"
    SELECTION_CANCELLED = "selection_cancelled"
    NO_CAMERA_AVAILABLE = "no_camera_available"
    CAPTURE_FILE_ERROR = "capture_file_error"
    DECODE_ERROR = "decode_error"
    UPLOAD_FAILED = "upload_failed"
    NETWORK_ERROR = "network_error"
    UNRECOGNIZED_LABEL = "unrecognized_label"
    NO_IMAGE_SELECTED = "no_image_selected"
    ANALYSIS_BUSY = "analysis_busy"


class FrameFitError(Exception):
    """Base class for recoverable workflow errors."""

    kind: ClassVar[ErrorKind]
    default_notice: ClassVar[str] = "Something went wrong."

    @property
    def notice(self) -> str:
        """User-facing one-line message."""
        return self.default_notice


class PermissionDenied(FrameFitError):
    kind = ErrorKind.PERMISSION_DENIED

    _NOTICES: ClassVar[dict[str, str]] = {
        "camera_access": "Camera permission is required to take photos.",
        "gallery_access": "Storage permission is required to access the gallery.",
    }

    def __init__(self, capability: str) -> None:
        super().__init__(f"Permission denied: {capability}")
        self.capability = capability

    @property
    def notice(self) -> str:
        return self._NOTICES.get(str(self.capability), "Permission denied.")


class CaptureCancelled(FrameFitError):
    kind = ErrorKind.CAPTURE_CANCELLED
    default_notice = "Photo capture cancelled."


class SelectionCancelled(FrameFitError):
    kind = ErrorKind.SELECTION_CANCELLED
    default_notice = "No image selected."


class NoCameraAvailable(FrameFitError):
    kind = ErrorKind.NO_CAMERA_AVAILABLE
    default_notice = "No camera found."


class CaptureFileError(FrameFitError):
    kind = ErrorKind.CAPTURE_FILE_ERROR
    default_notice = "Could not create the image file."


class DecodeError(FrameFitError):
    kind = ErrorKind.DECODE_ERROR
    default_notice = "The image could not be read."


class UploadFailed(FrameFitError):
    kind = ErrorKind.UPLOAD_FAILED

    def __init__(self, status_code: int) -> None:
        super().__init__(f"Upload failed with HTTP {status_code}")
        self.status_code = status_code

    @property
    def notice(self) -> str:
        return f"Analysis server returned an error ({self.status_code})."


class NetworkError(FrameFitError):
    kind = ErrorKind.NETWORK_ERROR
    default_notice = "Could not reach the analysis server."


class UnrecognizedLabel(FrameFitError):
    kind = ErrorKind.UNRECOGNIZED_LABEL

    def __init__(self, label: str | None, reason: str | None = None) -> None:
        super().__init__(reason or f"Unrecognized frame type: {label!r}")
        self.label = label

    @property
    def notice(self) -> str:
        return "The analysis result was not recognized."


class NoImageSelected(FrameFitError):
    kind = ErrorKind.NO_IMAGE_SELECTED
    default_notice = "Take or choose a photo first."


class AnalysisBusy(FrameFitError):
    kind = ErrorKind.ANALYSIS_BUSY
    default_notice = "An analysis is already running."
