"""Frame asset registry: which image represents each recommended frame shape."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from framefit.domain import FrameAsset


@dataclass(frozen=True)
class FrameAssetSpec:
    """Static metadata for a single frame asset."""

    asset: FrameAsset
    filename: str
    title: str


FRAME_ASSETS: dict[FrameAsset, FrameAssetSpec] = {
    FrameAsset.OVAL: FrameAssetSpec(
        asset=FrameAsset.OVAL,
        filename="oval_frames.png",
        title="Oval frames",
    ),
    FrameAsset.ROUND: FrameAssetSpec(
        asset=FrameAsset.ROUND,
        filename="round_frames.png",
        title="Round frames",
    ),
    FrameAsset.SQUARE: FrameAssetSpec(
        asset=FrameAsset.SQUARE,
        filename="square_frames.png",
        title="Square frames",
    ),
    FrameAsset.DEFAULT: FrameAssetSpec(
        asset=FrameAsset.DEFAULT,
        filename="default_frames.png",
        title="No recommendation yet",
    ),
}


def asset_path(assets_dir: Path, asset: FrameAsset) -> Path:
    """Return the image file for ``asset`` under ``assets_dir``."""
    return assets_dir / FRAME_ASSETS[asset].filename
