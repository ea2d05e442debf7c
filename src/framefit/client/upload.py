"""
HTTP upload client for the frame-type inference endpoint.

Contract:
  Request:  POST <endpoint>  multipart/form-data, one part 'image' (image.jpg, image/jpeg)
  Response: 2xx with a JSON body such as {"frame_type": "round"}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from framefit.client.auth import BearerAuth
from framefit.errors import NetworkError, UploadFailed

if TYPE_CHECKING:
    from types import TracebackType

    from framefit.config import Settings

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"
IMAGE_FILENAME = "image.jpg"
IMAGE_MIME_TYPE = "image/jpeg"


class UploadClient:
    """Single-attempt multipart uploader. No retries, no backoff."""

    def __init__(
        self,
        endpoint: str,
        timeout: httpx.Timeout,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = httpx.AsyncClient(
            timeout=timeout,
            auth=BearerAuth(api_key) if api_key else None,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> UploadClient:
        timeout = httpx.Timeout(
            connect=settings.connect_timeout,
            read=settings.read_timeout,
            write=settings.write_timeout,
            pool=settings.connect_timeout,
        )
        return cls(
            endpoint=str(settings.endpoint),
            timeout=timeout,
            api_key=settings.api_key,
            transport=transport,
        )

    async def upload(self, payload: bytes) -> str:
        """POST the JPEG payload and return the raw response body.

        Raises:
            UploadFailed: If the endpoint answers with a non-2xx status.
            NetworkError: On connect/read/write timeout or transport failure.
        """
        files = {IMAGE_FIELD: (IMAGE_FILENAME, payload, IMAGE_MIME_TYPE)}
        logger.info("Uploading %d bytes to %s", len(payload), self.endpoint)
        try:
            response = await self._client.post(self.endpoint, files=files)
        except httpx.TimeoutException as exc:
            logger.warning("Upload timed out: %s", exc)
            raise NetworkError(f"Timed out talking to {self.endpoint}") from exc
        except httpx.TransportError as exc:
            logger.warning("Upload failed: %s", exc)
            raise NetworkError(f"Could not reach {self.endpoint}: {exc}") from exc

        if not response.is_success:
            logger.warning("Upload rejected with HTTP %s", response.status_code)
            raise UploadFailed(response.status_code)

        logger.info("Upload done (HTTP %s, %d bytes)", response.status_code, len(response.content))
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> UploadClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
