"""Shared helpers for kubeinformer unit tests.

FakeTransport stands in for the API server: every ``watch()`` call records
the query it was given and replays the next scripted stream.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from kubeinformer.models.events import QueryParams, Status, WatchEvent, WatchResult

# ---------------------------------------------------------------------------
# Event factory helpers
# ---------------------------------------------------------------------------


def make_obj(
    resource_version: str | None = "1",
    name: str = "app-config",
    namespace: str = "default",
) -> dict[str, Any]:
    """Create a raw ConfigMap-like object with the given resourceVersion."""
    metadata: dict[str, Any] = {"name": name, "namespace": namespace}
    if resource_version is not None:
        metadata["resourceVersion"] = resource_version
    return {"apiVersion": "v1", "kind": "ConfigMap", "metadata": metadata, "data": {}}


def added(rv: str | None, name: str = "app-config") -> WatchEvent[dict[str, Any]]:
    return WatchEvent.added(make_obj(rv, name))


def modified(rv: str | None, name: str = "app-config") -> WatchEvent[dict[str, Any]]:
    return WatchEvent.modified(make_obj(rv, name))


def deleted(rv: str | None, name: str = "app-config") -> WatchEvent[dict[str, Any]]:
    return WatchEvent.deleted(make_obj(rv, name))


def gone() -> WatchEvent[Any]:
    return WatchEvent.error(
        Status(code=410, reason="Expired", message="too old resource version: 5 (1200)"),
    )


def server_error(code: int = 500) -> WatchEvent[Any]:
    return WatchEvent.error(Status(code=code, reason="InternalError", message="etcd unavailable"))


# ---------------------------------------------------------------------------
# Fake transport
# ---------------------------------------------------------------------------


class FakeTransport:
    """Replays scripted streams.

    Each entry of *script* is either a list of stream items or an exception
    that ``watch()`` raises.  Once the script runs out every call raises
    ``exhausted``.
    """

    def __init__(self, *script: list[WatchResult] | Exception, exhausted: Exception | None = None) -> None:
        self._script = list(script)
        self._exhausted = exhausted
        self.calls: list[QueryParams] = []
        self.closed = 0

    async def watch(self, params: QueryParams) -> AsyncIterator[WatchResult]:
        self.calls.append(params)
        if not self._script:
            if self._exhausted is not None:
                raise self._exhausted
            return self._stream([])
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        return self._stream(step)

    async def _stream(self, items: list[WatchResult]) -> AsyncIterator[WatchResult]:
        try:
            for item in items:
                yield item
        finally:
            self.closed += 1


async def drain(stream: AsyncIterator[WatchResult]) -> list[WatchResult]:
    return [item async for item in stream]

