"""Response interpreter: maps the endpoint's JSON body to a frame asset.

Only the exact labels ``round``, ``square`` and ``oval`` are accepted.
Anything else fails with ``UnrecognizedLabel``; nothing is guessed.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from framefit.client.schemas import FrameTypePayload
from framefit.domain import AnalysisResult, FrameAsset
from framefit.errors import UnrecognizedLabel

logger = logging.getLogger(__name__)

RECOGNIZED_LABELS: dict[str, FrameAsset] = {
    "round": FrameAsset.ROUND,
    "square": FrameAsset.SQUARE,
    "oval": FrameAsset.OVAL,
}


class ResponseInterpreter:
    def parse(self, raw_body: str) -> AnalysisResult:
        try:
            payload = FrameTypePayload.model_validate_json(raw_body)
        except ValidationError as exc:
            logger.warning("Unparseable analysis response: %s", exc.errors(include_url=False))
            raise UnrecognizedLabel(None, "Response is not a JSON object with a string frame_type") from exc

        label = payload.frame_type
        if label is None:
            raise UnrecognizedLabel(None, "Response has no frame_type")

        asset = RECOGNIZED_LABELS.get(label)
        if asset is None:
            logger.warning("Unrecognized frame type %r", label)
            raise UnrecognizedLabel(label)

        return AnalysisResult(frame_type=label, asset=asset)

    def interpret(self, raw_body: str) -> FrameAsset:
        return self.parse(raw_body).asset
