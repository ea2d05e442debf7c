"""Console presentation surface used by the command line front end."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

from framefit.analysis.assets import FRAME_ASSETS, asset_path
from framefit.domain import FrameAsset

if TYPE_CHECKING:
    from pathlib import Path

    from framefit.domain import AnalysisResult, ImageReference


class ConsoleSurface:
    """Prints the selected image, the recommendation, and notices."""

    def __init__(self, assets_dir: Path, out: TextIO) -> None:
        self._assets_dir = assets_dir
        self._out = out
        self.notices: list[str] = []

    def show_image(self, reference: ImageReference) -> None:
        print(f"Photo ({reference.origin}): {reference.locator}", file=self._out)
        # A new photo has no recommendation until it is analyzed.
        placeholder = FRAME_ASSETS[FrameAsset.DEFAULT]
        path = asset_path(self._assets_dir, FrameAsset.DEFAULT)
        print(f"Frames: {placeholder.title} -> {path}", file=self._out)

    def show_recommendation(self, result: AnalysisResult) -> None:
        spec = FRAME_ASSETS[result.asset]
        path = asset_path(self._assets_dir, result.asset)
        print(f"Recommended: {spec.title} [{result.frame_type}] -> {path}", file=self._out)

    def notify(self, message: str) -> None:
        self.notices.append(message)
        print(f"! {message}", file=self._out)
