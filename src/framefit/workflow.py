"""Photo workflow: acquire an image, analyze it, present the recommendation.

Analyze state machine:
    idle -> awaiting_encode -> awaiting_upload -> awaiting_parse -> done | failed

A failed analysis is reported once and the workflow returns to idle; the
user starts over by triggering analysis again. At most one analysis is in
flight at a time.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from framefit.domain import AnalysisState, Capability
from framefit.errors import AnalysisBusy, FrameFitError, NoImageSelected

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from framefit.acquisition.permissions import PermissionGate
    from framefit.acquisition.sources import ImageSourceAcquirer
    from framefit.analysis.interpreter import ResponseInterpreter
    from framefit.client.upload import UploadClient
    from framefit.domain import AnalysisResult, ImageReference
    from framefit.errors import ErrorKind
    from framefit.imaging.encoder import JpegEncoder

logger = logging.getLogger(__name__)


class OverlapPolicy(StrEnum):
    REJECT = "reject"
    QUEUE = "queue"


_TRANSITIONS: dict[AnalysisState, frozenset[AnalysisState]] = {
    AnalysisState.IDLE: frozenset({AnalysisState.AWAITING_ENCODE}),
    AnalysisState.AWAITING_ENCODE: frozenset({AnalysisState.AWAITING_UPLOAD, AnalysisState.FAILED}),
    AnalysisState.AWAITING_UPLOAD: frozenset({AnalysisState.AWAITING_PARSE, AnalysisState.FAILED}),
    AnalysisState.AWAITING_PARSE: frozenset({AnalysisState.DONE, AnalysisState.FAILED}),
    AnalysisState.DONE: frozenset({AnalysisState.IDLE, AnalysisState.AWAITING_ENCODE}),
    AnalysisState.FAILED: frozenset({AnalysisState.IDLE}),
}


class PresentationSurface(Protocol):
    """Read-only view of the workflow (the UI layer)."""

    def show_image(self, reference: ImageReference) -> None: ...

    def show_recommendation(self, result: AnalysisResult) -> None: ...

    def notify(self, message: str) -> None: ...


class PhotoWorkflow:
    """Owns the current image reference and analysis result."""

    def __init__(
        self,
        gate: PermissionGate,
        acquirer: ImageSourceAcquirer,
        encoder: JpegEncoder,
        uploader: UploadClient,
        interpreter: ResponseInterpreter,
        surface: PresentationSurface,
        *,
        analyze_on_select: bool = False,
        overlap_policy: OverlapPolicy = OverlapPolicy.REJECT,
    ) -> None:
        self._gate = gate
        self._acquirer = acquirer
        self._encoder = encoder
        self._uploader = uploader
        self._interpreter = interpreter
        self._surface = surface
        self._analyze_on_select = analyze_on_select
        self._overlap_policy = OverlapPolicy(overlap_policy)

        self._state = AnalysisState.IDLE
        self._reference: ImageReference | None = None
        self._result: AnalysisResult | None = None
        self._last_error: ErrorKind | None = None
        self._analysis_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[AnalysisResult | None]] = set()

    # -- Read-only state ----------------------------------------------------

    @property
    def state(self) -> AnalysisState:
        return self._state

    @property
    def reference(self) -> ImageReference | None:
        return self._reference

    @property
    def result(self) -> AnalysisResult | None:
        return self._result

    @property
    def last_error(self) -> ErrorKind | None:
        return self._last_error

    @property
    def busy(self) -> bool:
        return self._analysis_lock.locked()

    # -- Acquisition --------------------------------------------------------

    async def capture_photo(self) -> ImageReference | None:
        """Take a photo with the camera and make it the current image."""
        return await self._acquire(Capability.CAMERA_ACCESS, self._acquirer.capture_from_camera)

    async def pick_photo(self) -> ImageReference | None:
        """Choose an image from the gallery and make it the current image."""
        return await self._acquire(Capability.GALLERY_ACCESS, self._acquirer.pick_from_gallery)

    async def _acquire(
        self,
        capability: Capability,
        acquire: Callable[[], Awaitable[ImageReference]],
    ) -> ImageReference | None:
        try:
            await self._gate.require(capability)
            reference = await acquire()
        except FrameFitError as exc:
            self._report(exc)
            return None

        if self._tasks:
            # Analyses of the previous image are now pointless.
            self.cancel()
            await self.drain()

        self._reference = reference
        self._result = None
        self._last_error = None
        self._surface.show_image(reference)
        if self._analyze_on_select:
            self.start_analysis()
        return reference

    # -- Analysis -----------------------------------------------------------

    def start_analysis(self) -> asyncio.Task[AnalysisResult | None]:
        """Run :meth:`analyze` as a background task owned by this workflow."""
        task = asyncio.create_task(self.analyze(), name="framefit-analyze")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def analyze(self) -> AnalysisResult | None:
        """Encode, upload, and interpret the current image.

        Returns the result, or None if the analysis failed, was rejected, or
        finished after the image was replaced.
        """
        reference = self._reference
        if reference is None:
            self._report(NoImageSelected("Analyze triggered without an image"))
            return None

        if self._overlap_policy is OverlapPolicy.REJECT and self._analysis_lock.locked():
            self._report(AnalysisBusy("Analysis already in flight"), record=False)
            return None

        async with self._analysis_lock:
            try:
                return await self._run(reference)
            except FrameFitError as exc:
                self._fail(exc)
                return None
            except asyncio.CancelledError:
                logger.info("Analysis of %s cancelled", reference.locator)
                self._state = AnalysisState.IDLE
                raise
            except Exception:
                logger.exception("Analysis of %s crashed", reference.locator)
                self._state = AnalysisState.IDLE
                raise

    async def _run(self, reference: ImageReference) -> AnalysisResult | None:
        self._last_error = None
        self._transition(AnalysisState.AWAITING_ENCODE)
        payload = await asyncio.to_thread(self._encoder.encode, reference)

        self._transition(AnalysisState.AWAITING_UPLOAD)
        raw_body = await self._uploader.upload(payload)

        self._transition(AnalysisState.AWAITING_PARSE)
        result = self._interpreter.parse(raw_body)
        self._transition(AnalysisState.DONE)

        if self._reference != reference:
            logger.info("Dropping result for replaced image %s", reference.locator)
            self._transition(AnalysisState.IDLE)
            return None

        self._result = result
        logger.info("Recommended %s frames for %s", result.asset, reference.locator)
        self._surface.show_recommendation(result)
        return result

    def _transition(self, new_state: AnalysisState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"Invalid analysis transition {self._state} -> {new_state}")
        logger.debug("Analysis state %s -> %s", self._state, new_state)
        self._state = new_state

    def _fail(self, exc: FrameFitError) -> None:
        self._transition(AnalysisState.FAILED)
        self._report(exc)
        self._transition(AnalysisState.IDLE)

    def _report(self, exc: FrameFitError, *, record: bool = True) -> None:
        logger.warning("%s: %s", exc.kind, exc)
        if record:
            self._last_error = exc.kind
        self._surface.notify(exc.notice)

    # -- Lifetime -----------------------------------------------------------

    def cancel(self) -> None:
        """Cancel every in-flight analysis task."""
        for task in list(self._tasks):
            task.cancel()

    async def drain(self) -> None:
        """Wait for every in-flight analysis task to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        self.cancel()
        await self.drain()
        await self._uploader.aclose()

    async def __aenter__(self) -> PhotoWorkflow:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
