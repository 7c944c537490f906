"""Supervisory poll loop around an Informer.

The informer returns one finite stream per ``poll()`` and never retries.
InformerRunner is the outer loop that keeps polling for as long as it runs:

    runner = InformerRunner(informer, handle_event)
    await runner.start()
    # ... runs until cancelled or stop() is called
    await runner.stop()
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Awaitable, Callable

from kubeinformer.exceptions import TransportError
from kubeinformer.models.events import WatchResult
from kubeinformer.observability.logging import get_logger
from kubeinformer.runtime.informer import Informer

Handler = Callable[[WatchResult], Awaitable[None]]

_RETRY_DELAY_S: float = 5.0
_STATUS_INTERVAL_S: float = 30.0


class InformerRunner:
    """Keeps an informer polling and hands every stream item to *handler*."""

    def __init__(
        self,
        informer: Informer,
        handler: Handler,
        retry_delay: float = _RETRY_DELAY_S,
        status_interval: float = _STATUS_INTERVAL_S,
    ) -> None:
        self._informer = informer
        self._handler = handler
        self._retry_delay = retry_delay
        self._status_interval = status_interval
        self._log = get_logger(f"runner.{informer.name}")

        self._running: bool = False
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the poll loop and the status reporter as background tasks."""
        if self._running:
            return
        self._running = True
        name = self._informer.name
        self._tasks = [
            asyncio.create_task(self._poll_loop(), name=f"informer-{name}"),
            asyncio.create_task(self._status_loop(), name=f"informer-status-{name}"),
        ]
        self._log.info("runner_started", informer=name)

    async def stop(self) -> None:
        """Cancel both tasks and wait for them to exit."""
        self._running = False
        for task in self._tasks:
            if not task.done():
                task.cancel()
        for task in self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._tasks = []
        self._log.info("runner_stopped", informer=self._informer.name)

    async def wait(self) -> None:
        """Block until the poll loop exits."""
        if self._tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await self._tasks[0]

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                await self._poll_once()
            except TransportError as exc:
                self._log.warning(
                    "poll_failed",
                    informer=self._informer.name,
                    status=exc.status,
                    error=str(exc),
                    retry_in_s=self._retry_delay,
                )
                await asyncio.sleep(self._retry_delay)
            except Exception as exc:
                if not self._running:
                    return
                self._log.error(
                    "poll_loop_error",
                    informer=self._informer.name,
                    error=str(exc),
                    retry_in_s=self._retry_delay,
                    exc_info=True,
                )
                await asyncio.sleep(self._retry_delay)

    async def _poll_once(self) -> None:
        """Run one poll and hand its items to the handler until the stream ends."""
        stream = await self._informer.poll()
        async with contextlib.aclosing(stream):
            async for item in stream:
                if not self._running:
                    return
                await self._dispatch(item)

    async def _dispatch(self, item: WatchResult) -> None:
        try:
            await self._handler(item)
        except Exception as exc:
            self._log.error(
                "handler_failed",
                informer=self._informer.name,
                error=str(exc),
                exc_info=True,
            )

    async def _status_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._status_interval)
            self._log.info(
                "informer_status",
                informer=self._informer.name,
                version=await self._informer.current_version(),
                state=self._informer.state.value,
            )
