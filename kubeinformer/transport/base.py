"""Transport protocol consumed by the informer."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from kubeinformer.models.events import QueryParams, WatchResult


class Transport(Protocol):
    """Opens one watch connection.

    ``watch`` raises ``TransportError`` when the request cannot be started.
    Once the stream is open, errors are yielded as ``InformerError`` items
    and the stream ends when the server closes the connection.  A stream
    with an ``aclose()`` coroutine releases its connection there, whether
    or not it was iterated.
    """

    async def watch(self, params: QueryParams) -> AsyncIterator[WatchResult]: ...
