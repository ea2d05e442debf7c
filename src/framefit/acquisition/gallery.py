"""Gallery picker backed by local image files."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from framefit.errors import DecodeError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class LocalGalleryPicker:
    """Picks an image file chosen by a callback.

    The chooser returns a filesystem path or ``file://`` URI, or None when
    the user backs out. Selections are returned as ``file://`` handles.

    Raises:
        DecodeError: If the chosen file's type is known and is not an image.
    """

    def __init__(self, chooser: Callable[[], str | None]) -> None:
        self._chooser = chooser

    async def pick(self, mime_filter: str) -> str | None:
        choice = await asyncio.to_thread(self._chooser)
        if not choice:
            return None

        if choice.startswith("file:"):
            handle = choice
            name = choice
        else:
            path = Path(choice).expanduser().resolve()
            handle = path.as_uri()
            name = path.name

        # Unknown types are left to the decoder.
        mime_type, _ = mimetypes.guess_type(name)
        if mime_type is not None and not fnmatch.fnmatch(mime_type, mime_filter):
            logger.warning("Refusing %s: %s does not match %s", choice, mime_type, mime_filter)
            raise DecodeError(f"Not an image: {choice} ({mime_type})")
        return handle
