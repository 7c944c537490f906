"""Informer: resumable watch over one Kubernetes resource kind.

This observes a watch endpoint and tracks the last seen resourceVersion, so
each new connection picks up where the previous one stopped.  When the API
server answers with 410 Gone (the requested version has left its history
window) the next ``poll()`` backs off and relists from "0", which delivers an
ADDED event for every live object.  Consumers may therefore see occasional
duplicate ADDED events after a resync.

Usage::

    informer = Informer(transport, QueryParams(timeout_seconds=290), name="configmap")
    while True:
        try:
            stream = await informer.poll()
        except TransportError:
            await asyncio.sleep(5)
            continue
        async for item in stream:
            ...
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from enum import StrEnum

from kubeinformer.models.events import QueryParams, WatchResult
from kubeinformer.observability.logging import get_logger
from kubeinformer.observability.metrics import informer_polls_total
from kubeinformer.runtime.cursor import CursorState
from kubeinformer.runtime.intercept import CursorInterceptor
from kubeinformer.runtime.resync import DEFAULT_BACKOFF_S, ResyncController
from kubeinformer.transport.base import Transport


class InformerState(StrEnum):
    """Where the informer is in its poll cycle. Diagnostic only."""

    IDLE = "idle"
    WATCHING = "watching"
    DESYNCED = "desynced"
    RESYNCING = "resyncing"


class Informer:
    """One logical watch session over one resource kind.

    ``poll()`` must not be called again while a previous stream from the same
    informer (or any copy made with :meth:`with_params`) is still being
    consumed.  The cursor accessors are safe to call from any task.
    """

    def __init__(
        self,
        transport: Transport,
        params: QueryParams | None = None,
        *,
        name: str = "informer",
        backoff_seconds: float = DEFAULT_BACKOFF_S,
        cursor: CursorState | None = None,
    ) -> None:
        self._transport = transport
        self._params = params or QueryParams()
        self._name = name
        self._cursor = cursor or CursorState()
        self._resync = ResyncController(self._cursor, backoff_seconds, name=name)
        self._log = get_logger(f"informer.{name}")
        self._state = InformerState.IDLE

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def with_params(self, params: QueryParams) -> Informer:
        """Return an informer using *params* that shares this one's cursor.

        Any ``resource_version`` in *params* is ignored; the cursor decides.
        """
        return Informer(
            self._transport,
            params,
            name=self._name,
            backoff_seconds=self._resync.backoff_seconds,
            cursor=self._cursor,
        )

    @property
    def params(self) -> QueryParams:
        return self._params

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> InformerState:
        return self._state

    # ------------------------------------------------------------------
    # Cursor access
    # ------------------------------------------------------------------

    async def current_version(self) -> str:
        """The last resourceVersion recorded from the stream."""
        return await self._cursor.get()

    async def set_version(self, version: str) -> None:
        """Override the cursor with an externally tracked version.

        Prefer not to use this.  Objects deleted while nothing was watching
        are missed regardless of the version you resume from; owner
        references and finalizers are the way to clean up related resources.
        """
        self._log.debug("set_version", informer=self._name, version=version)
        await self._cursor.set(version)

    async def reset_version(self) -> None:
        """Make the next poll relist every live object as ADDED events."""
        self._log.debug("reset_version", informer=self._name)
        await self._cursor.reset()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll(self) -> PollStream:
        """Open one watch connection and return its event stream.

        The stream ends when the server closes the connection (usually at
        ``timeout_seconds``); call ``poll()`` again to keep watching.  410
        Gone and every other server error are yielded as ERROR events, and
        failures inside the open stream are yielded as ``InformerError``
        items.

        Raises:
            TransportError: the watch request could not be started.  Nothing
                is retried here; the caller's loop decides when to poll again.
        """
        if self._state is InformerState.DESYNCED or await self._cursor.needs_resync():
            self._state = InformerState.RESYNCING
        await self._resync.maybe_resync()

        origin = await self._cursor.get()
        self._log.info("poll_start", informer=self._name, version=origin)
        informer_polls_total.labels(kind=self._name).inc()

        try:
            stream = await self._transport.watch(self._params.with_version(origin))
        except BaseException:
            self._state = InformerState.IDLE
            raise
        self._state = InformerState.WATCHING

        interceptor = CursorInterceptor(self._cursor, name=self._name, on_gone=self._mark_desynced)
        return PollStream(interceptor.wrap(stream), stream, on_close=self._poll_ended)

    def _mark_desynced(self) -> None:
        self._state = InformerState.DESYNCED

    def _poll_ended(self) -> None:
        if self._state is InformerState.WATCHING:
            self._state = InformerState.IDLE
        self._log.debug("poll_end", informer=self._name, state=self._state.value)


class PollStream:
    """The stream returned by ``Informer.poll()``.

    ``aclose()`` closes the transport stream whether or not iteration has
    started, so abandoning a poll never leaves its connection open.
    """

    def __init__(
        self,
        items: AsyncGenerator[WatchResult, None],
        source: AsyncIterator[WatchResult],
        on_close: Callable[[], None],
    ) -> None:
        self._items = items
        self._source = source
        self._on_close = on_close
        self._closed = False

    def __aiter__(self) -> PollStream:
        return self

    async def __anext__(self) -> WatchResult:
        try:
            return await self._items.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._items.aclose()
            aclose = getattr(self._source, "aclose", None)
            if aclose is not None:
                await aclose()
        finally:
            self._on_close()
