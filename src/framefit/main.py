"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from framefit.acquisition.camera import OpenCVCaptureDevice
from framefit.acquisition.gallery import LocalGalleryPicker
from framefit.acquisition.permissions import ConsolePermissionProvider, PermissionGate, ask_on_console
from framefit.acquisition.sources import ImageSourceAcquirer
from framefit.analysis.interpreter import ResponseInterpreter
from framefit.client.upload import UploadClient
from framefit.config import get_settings
from framefit.console import ConsoleSurface
from framefit.domain import Capability
from framefit.imaging.encoder import JpegEncoder
from framefit.workflow import OverlapPolicy, PhotoWorkflow

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from framefit.acquisition.permissions import PermissionProvider
    from framefit.acquisition.sources import CaptureDevice, GalleryPicker
    from framefit.config import Settings
    from framefit.workflow import PresentationSurface

logger = logging.getLogger(__name__)


def create_workflow(
    settings: Settings,
    surface: PresentationSurface,
    *,
    camera: CaptureDevice | None = None,
    gallery: GalleryPicker | None = None,
    permissions: PermissionProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    analyze_on_select: bool | None = None,
) -> PhotoWorkflow:
    """Wire a workflow from settings and the given platform collaborators."""
    if permissions is None:
        granted = tuple(Capability) if settings.auto_grant else ()
        permissions = ConsolePermissionProvider(granted=granted, ask=ask_on_console)

    return PhotoWorkflow(
        gate=PermissionGate(permissions),
        acquirer=ImageSourceAcquirer(settings.pictures_dir, camera=camera, gallery=gallery),
        encoder=JpegEncoder.from_settings(settings),
        uploader=UploadClient.from_settings(settings, transport=transport),
        interpreter=ResponseInterpreter(),
        surface=surface,
        analyze_on_select=settings.analyze_on_select if analyze_on_select is None else analyze_on_select,
        overlap_policy=OverlapPolicy(settings.overlap_policy),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="framefit",
        description="Take or choose a photo and get an eyeglass frame recommendation.",
        epilog="Example: FRAMEFIT_ENDPOINT=http://localhost:8000/analyze framefit gallery face.jpg",
    )
    parser.add_argument(
        "--no-analyze",
        action="store_true",
        help="Only acquire the photo, do not upload it for analysis.",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override FRAMEFIT_LOG_LEVEL.",
    )
    sources = parser.add_subparsers(dest="source", required=True)
    sources.add_parser("camera", help="Capture a photo with the webcam.")
    gallery = sources.add_parser("gallery", help="Use an existing image file.")
    gallery.add_argument("path", help="Path or file:// URI of the image.")
    return parser


async def run(
    args: argparse.Namespace,
    settings: Settings,
    surface: ConsoleSurface,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    camera: OpenCVCaptureDevice | None = None
    gallery: LocalGalleryPicker | None = None
    if args.source == "camera":
        camera = OpenCVCaptureDevice(index=settings.camera_index, quality=settings.jpeg_quality)
    else:
        gallery = LocalGalleryPicker(lambda: args.path)

    try:
        # Analysis is awaited explicitly below rather than started on selection.
        async with create_workflow(
            settings,
            surface,
            camera=camera,
            gallery=gallery,
            transport=transport,
            analyze_on_select=False,
        ) as workflow:
            if args.source == "camera":
                reference = await workflow.capture_photo()
            else:
                reference = await workflow.pick_photo()
            if reference is None:
                return False
            if args.no_analyze:
                return True
            return await workflow.analyze() is not None
    finally:
        if camera is not None:
            camera.release()


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Starting FrameFit (endpoint=%s, source=%s)", settings.endpoint, args.source)

    surface = ConsoleSurface(settings.assets_dir, out=sys.stdout)
    ok = asyncio.run(run(args, settings, surface))
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
