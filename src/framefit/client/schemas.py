"""Pydantic schema for the inference endpoint response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FrameTypePayload(BaseModel):
    """Response body of the frame-type endpoint.

    Only ``frame_type`` is read; any other fields the server sends are kept.
    """

    model_config = ConfigDict(extra="allow")

    frame_type: str | None = Field(default=None, description="Frame shape label, e.g. 'round'")
