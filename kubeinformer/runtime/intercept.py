"""Stream stage that keeps CursorState in step with a watch stream.

The stage is transparent to values: every item is yielded exactly as it was
received, after its side effects on the cursor have been applied.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator, Callable

from kubeinformer.exceptions import InformerError
from kubeinformer.models.events import Status, WatchResult
from kubeinformer.observability.logging import get_logger
from kubeinformer.observability.metrics import informer_errors_total, informer_events_total
from kubeinformer.runtime.cursor import CursorState


class CursorInterceptor:
    """Applies per-event cursor updates before handing events to the consumer.

    - ADDED/MODIFIED/DELETED: merge the object's resourceVersion into the cursor.
    - ERROR 410 Gone: arm the resync flag for the next poll.
    - Any other ERROR or a stream error: log only.
    """

    def __init__(
        self,
        cursor: CursorState,
        name: str = "informer",
        on_gone: Callable[[], None] | None = None,
    ) -> None:
        self._cursor = cursor
        self._name = name
        self._on_gone = on_gone
        self._log = get_logger(f"intercept.{name}")

    async def observe(self, item: WatchResult) -> None:
        """Apply the side effects of one stream item."""
        if isinstance(item, InformerError):
            informer_errors_total.labels(kind=self._name, reason=type(item).__name__).inc()
            self._log.warning("watch_stream_error", informer=self._name, error=str(item))
            return

        informer_events_total.labels(kind=self._name, event_type=item.type.value).inc()

        if item.status is not None:
            await self._observe_error(item.status)
            return

        incoming = item.resource_version
        if not incoming:
            return
        stored = await self._cursor.merge(incoming)
        self._log.debug("cursor_advanced", informer=self._name, version=stored, received=incoming)

    async def _observe_error(self, status: Status) -> None:
        informer_errors_total.labels(kind=self._name, reason=status.reason or str(status.code)).inc()
        if status.is_gone:
            self._log.warning(
                "watch_desynced",
                informer=self._name,
                code=status.code,
                reason=status.reason,
                message=status.message,
            )
            await self._cursor.arm_resync()
            if self._on_gone is not None:
                self._on_gone()
        else:
            self._log.warning(
                "watch_error_event",
                informer=self._name,
                code=status.code,
                reason=status.reason,
                message=status.message,
            )

    async def wrap(self, stream: AsyncIterator[WatchResult]) -> AsyncGenerator[WatchResult, None]:
        """Yield every item of *stream* unchanged, observing each one first.

        Closing the returned iterator closes *stream*.
        """
        try:
            async for item in stream:
                await self.observe(item)
                yield item
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
