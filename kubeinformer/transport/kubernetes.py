"""Watch transport on top of kubernetes_asyncio.

The list function is called with ``watch=True`` and ``_preload_content=False``
so the raw aiohttp response can be read frame by frame.  Each line of the
body is one JSON watch frame.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncGenerator, Callable, Coroutine
from types import SimpleNamespace
from typing import Any

import aiohttp
from kubernetes_asyncio.client.exceptions import ApiException

from kubeinformer.exceptions import DeserializationError, TransportError
from kubeinformer.models.events import QueryParams, WatchEvent, WatchResult
from kubeinformer.observability.logging import get_logger

ListFunc = Callable[..., Coroutine[Any, Any, Any]]
Decoder = Callable[[dict[str, Any]], Any]

_STREAM_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, ValueError)


class KubernetesTransport:
    """Opens watch connections through a kubernetes_asyncio list function.

    Args:
        list_func: e.g. ``CoreV1Api().list_namespaced_config_map`` bound to a
            namespace with :func:`functools.partial`.
        decoder: turns the raw ``object`` dict of ADDED/MODIFIED/DELETED
            frames into a model; raw dicts are passed through when omitted.
        name: short identifier used in log labels.
    """

    def __init__(self, list_func: ListFunc, decoder: Decoder | None = None, name: str = "kubernetes") -> None:
        self._list_func = list_func
        self._decoder = decoder
        self._name = name
        self._log = get_logger(f"transport.{name}")

    async def watch(self, params: QueryParams) -> WatchStream:
        """Start the watch request and return its frame stream.

        Raises:
            TransportError: the API server rejected the request or could not
                be reached.
        """
        kwargs = params.to_kwargs()
        try:
            resp = await self._list_func(watch=True, _preload_content=False, **kwargs)
        except ApiException as exc:
            raise TransportError(f"watch request failed: {exc.status} {exc.reason}", status=exc.status) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"watch request failed: {exc}") from exc

        self._log.debug("watch_opened", transport=self._name, **kwargs)
        return WatchStream(resp, self._frames(resp))

    async def _frames(self, resp: Any) -> AsyncGenerator[WatchResult, None]:
        while True:
            try:
                line = await resp.content.readline()
            except _STREAM_ERRORS as exc:
                yield TransportError(f"watch stream interrupted: {exc}")
                return
            if not line:
                return
            line = line.strip()
            if not line:
                continue
            yield self._decode(line)

    def _decode(self, line: bytes) -> WatchResult:
        try:
            frame = json.loads(line)
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError
            return DeserializationError(f"undecodable watch frame: {exc}", raw=line)
        try:
            return WatchEvent.from_dict(frame, self._decoder)
        except DeserializationError as exc:
            return exc


def model_decoder(api_client: Any, response_type: str) -> Decoder:
    """Decoder producing kubernetes_asyncio models, e.g. ``"V1ConfigMap"``."""

    def _decode(raw: dict[str, Any]) -> Any:
        return api_client.deserialize(SimpleNamespace(data=json.dumps(raw)), response_type)

    return _decode



class WatchStream:
    """Frame iterator that owns the HTTP response of one watch request.

    The response is closed when the frames run out or on ``aclose()``, even
    if iteration never started.
    """

    def __init__(self, resp: Any, frames: AsyncGenerator[WatchResult, None]) -> None:
        self._resp = resp
        self._frames = frames
        self._closed = False

    def __aiter__(self) -> WatchStream:
        return self

    async def __anext__(self) -> WatchResult:
        try:
            return await self._frames.__anext__()
        except StopAsyncIteration:
            self._close_response()
            raise

    async def aclose(self) -> None:
        await self._frames.aclose()
        self._close_response()

    def _close_response(self) -> None:
        if not self._closed:
            self._closed = True
            self._resp.close()
