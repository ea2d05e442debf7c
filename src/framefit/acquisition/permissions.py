"""Permission gate in front of the camera and gallery acquirers."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from framefit.domain import Capability, PermissionStatus
from framefit.errors import PermissionDenied

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class PermissionProvider(Protocol):
    """Platform side of permission handling."""

    def is_granted(self, capability: Capability) -> bool:
        """Return True if the capability has already been granted."""
        ...

    async def request(self, capability: Capability) -> bool:
        """Prompt the user for the capability and return their answer."""
        ...


class ConsolePermissionProvider:
    """Permission provider that asks through a yes/no callback.

    Grants are remembered for the lifetime of the provider. Without an
    ``ask`` callback every request is denied.
    """

    def __init__(
        self,
        granted: Iterable[Capability] = (),
        ask: Callable[[str], bool] | None = None,
    ) -> None:
        self._granted: set[Capability] = set(granted)
        self._ask = ask

    def is_granted(self, capability: Capability) -> bool:
        return capability in self._granted

    async def request(self, capability: Capability) -> bool:
        if self._ask is None:
            return False
        prompt = f"Allow {capability.replace('_', ' ')}? [y/N] "
        answer = await asyncio.to_thread(self._ask, prompt)
        if answer:
            self._granted.add(capability)
        return answer


def ask_on_console(prompt: str) -> bool:
    """Read a yes/no answer from stdin."""
    try:
        reply = input(prompt)
    except EOFError:
        return False
    return reply.strip().lower() in {"y", "yes"}


class PermissionGate:
    """Ensures a capability is granted before its acquirer runs.

    Only one permission request is outstanding at a time; a denial is final
    for the current user action.
    """

    def __init__(self, provider: PermissionProvider) -> None:
        self._provider = provider
        self._request_lock = asyncio.Lock()

    async def ensure(self, capability: Capability) -> PermissionStatus:
        if self._provider.is_granted(capability):
            logger.info("Permission %s already granted", capability)
            return PermissionStatus.GRANTED

        async with self._request_lock:
            # Another request may have granted it while we waited.
            if self._provider.is_granted(capability):
                return PermissionStatus.GRANTED
            logger.info("Requesting permission %s", capability)
            granted = await self._provider.request(capability)

        if granted:
            logger.info("Permission %s granted", capability)
            return PermissionStatus.GRANTED
        logger.info("Permission %s denied", capability)
        return PermissionStatus.DENIED

    async def require(self, capability: Capability) -> None:
        """Like :meth:`ensure`, but raise ``PermissionDenied`` on denial."""
        if await self.ensure(capability) is PermissionStatus.DENIED:
            raise PermissionDenied(capability)
