"""Shared cursor state for one logical watch session."""

from __future__ import annotations

import asyncio

from kubeinformer.runtime.version import ZERO_VERSION, merge_resource_version


class CursorState:
    """Last-seen resourceVersion plus the "needs resync" flag.

    One instance is shared by every copy of an :class:`Informer`.  Every
    operation takes the lock for a single read or write only, so readers in
    other tasks (status reporters, metrics) never wait on network I/O and
    always see a complete value.
    """

    def __init__(self, version: str = ZERO_VERSION) -> None:
        self._version = version
        self._needs_resync = False
        self._lock = asyncio.Lock()

    async def get(self) -> str:
        async with self._lock:
            return self._version

    async def set(self, version: str) -> None:
        """Overwrite the cursor unconditionally."""
        async with self._lock:
            self._version = version

    async def reset(self) -> None:
        """Rewind to "0" so the next watch relists every live object."""
        await self.set(ZERO_VERSION)

    async def merge(self, incoming: str) -> str:
        """Apply the merge policy to *incoming* and return the stored value."""
        async with self._lock:
            self._version = merge_resource_version(self._version, incoming)
            return self._version

    async def needs_resync(self) -> bool:
        async with self._lock:
            return self._needs_resync

    async def arm_resync(self) -> None:
        async with self._lock:
            self._needs_resync = True

    async def clear_resync(self) -> None:
        async with self._lock:
            self._needs_resync = False
