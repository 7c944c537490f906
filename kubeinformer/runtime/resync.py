"""Backoff and cursor reset after the server reports 410 Gone."""

from __future__ import annotations

import asyncio

from kubeinformer.observability.logging import get_logger
from kubeinformer.observability.metrics import (
    informer_resync_backoff_seconds,
    informer_resyncs_total,
)
from kubeinformer.runtime.cursor import CursorState

DEFAULT_BACKOFF_S: float = 10.0


class ResyncController:
    """Decides at the top of each poll whether the cursor must be rewound.

    The flag is re-read after the backoff sleep and the lock is not held
    across it: an override that clears the flag while we sleep skips the
    reset.
    """

    def __init__(
        self,
        cursor: CursorState,
        backoff_seconds: float = DEFAULT_BACKOFF_S,
        name: str = "informer",
    ) -> None:
        self._cursor = cursor
        self._backoff_s = backoff_seconds
        self._name = name
        self._log = get_logger(f"resync.{name}")

    @property
    def backoff_seconds(self) -> float:
        return self._backoff_s

    async def maybe_resync(self) -> bool:
        """Back off and reset the cursor if a 410 was seen on the last stream.

        Returns True when the cursor was reset to "0".
        """
        if not await self._cursor.needs_resync():
            return False

        self._log.info("resync_backoff", informer=self._name, delay_s=self._backoff_s)
        informer_resync_backoff_seconds.labels(kind=self._name).observe(self._backoff_s)
        await asyncio.sleep(self._backoff_s)

        reset = False
        if await self._cursor.needs_resync():
            await self._cursor.reset()
            informer_resyncs_total.labels(kind=self._name).inc()
            self._log.info("resync_reset", informer=self._name)
            reset = True
        else:
            self._log.debug("resync_skipped", informer=self._name)

        await self._cursor.clear_resync()
        return reset
