"""Integration tests for the watch-resync cycle.

Informer + CursorInterceptor + ResyncController + KubernetesTransport are
wired together; only the API server is scripted.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from kubeinformer.exceptions import DeserializationError, TransportError
from kubeinformer.models.events import EventType, QueryParams, WatchEvent, WatchResult
from kubeinformer.runner import InformerRunner
from kubeinformer.runtime.informer import Informer, InformerState
from kubeinformer.transport.kubernetes import KubernetesTransport

from .conftest import FakeApiServer, config_map, frame, gone_frame


def _informer(server: FakeApiServer, **kwargs: float) -> Informer:
    transport = KubernetesTransport(server, name="configmap")
    return Informer(transport, QueryParams(timeout_seconds=10), name="configmap", **kwargs)


async def _drain(informer: Informer) -> list[WatchResult]:
    return [item async for item in await informer.poll()]


# ---------------------------------------------------------------------------
# End-to-end desync scenario
# ---------------------------------------------------------------------------


class TestDesyncScenario:
    async def test_added_modified_gone_then_relist(self) -> None:
        server = FakeApiServer(
            [
                frame("ADDED", config_map("app", "5")),
                frame("MODIFIED", config_map("app", "7")),
                gone_frame(),
            ],
            [frame("ADDED", config_map("app", "12"))],
        )
        informer = _informer(server)

        versions_seen: list[str] = []
        items: list[WatchResult] = []
        async for item in await informer.poll():
            items.append(item)
            versions_seen.append(await informer.current_version())

        assert versions_seen == ["5", "7", "7"]
        last = items[-1]
        assert isinstance(last, WatchEvent)
        assert last.type is EventType.ERROR
        assert last.status is not None and last.status.code == 410
        assert informer.state is InformerState.DESYNCED

        with patch("kubeinformer.runtime.resync.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            relisted = await _drain(informer)

        mock_sleep.assert_awaited_once_with(10.0)
        assert server.versions() == ["0", "0"]
        assert [item.resource_version for item in relisted] == ["12"]  # type: ignore[union-attr]
        assert await informer.current_version() == "12"
        assert server.requests[1]["timeout_seconds"] == 10
        assert server.requests[1]["watch"] is True

    async def test_resume_after_clean_timeout(self) -> None:
        server = FakeApiServer(
            [frame("ADDED", config_map("a", "100")), frame("ADDED", config_map("b", "101"))],
            [frame("DELETED", config_map("a", "104"))],
            [],
        )
        informer = _informer(server)

        await _drain(informer)
        await _drain(informer)
        await _drain(informer)

        assert server.versions() == ["0", "101", "104"]
        for resp in server.responses:
            resp.close.assert_called_once()


# ---------------------------------------------------------------------------
# Failure modes
# ---------------------------------------------------------------------------


class TestFailureModes:
    async def test_setup_failure_keeps_cursor(self) -> None:
        server = FakeApiServer([frame("ADDED", config_map("a", "30"))], 500, [])
        informer = _informer(server)
        await _drain(informer)

        with pytest.raises(TransportError) as exc_info:
            await informer.poll()
        assert exc_info.value.status == 500

        await _drain(informer)
        assert server.versions() == ["0", "30", "30"]

    async def test_garbage_frame_does_not_end_stream(self) -> None:
        server = FakeApiServer([b"<html>proxy error</html>\n", frame("ADDED", config_map("a", "9"))])
        informer = _informer(server)

        items = await _drain(informer)

        assert isinstance(items[0], DeserializationError)
        assert await informer.current_version() == "9"

    async def test_other_status_errors_do_not_resync(self) -> None:
        status = {"kind": "Status", "code": 500, "reason": "InternalError", "message": "etcd leader changed"}
        server = FakeApiServer([frame("ERROR", status)], [])
        informer = _informer(server)

        await _drain(informer)
        with patch("kubeinformer.runtime.resync.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            await _drain(informer)

        mock_sleep.assert_not_awaited()
        assert informer.state is InformerState.IDLE


# ---------------------------------------------------------------------------
# Supervised by InformerRunner
# ---------------------------------------------------------------------------


class TestRunnerDriven:
    async def test_runner_recovers_from_gone(self) -> None:
        server = FakeApiServer(
            [frame("ADDED", config_map("a", "5")), gone_frame()],
            [frame("ADDED", config_map("a", "40")), frame("ADDED", config_map("b", "41"))],
        )
        informer = _informer(server, backoff_seconds=0.0)
        received: list[WatchResult] = []

        async def handler(item: WatchResult) -> None:
            received.append(item)

        runner = InformerRunner(informer, handler, retry_delay=0.01, status_interval=60.0)
        await runner.start()

        async def _until_relisted() -> None:
            while await informer.current_version() != "41":
                await asyncio.sleep(0.005)

        await asyncio.wait_for(_until_relisted(), 2.0)
        await runner.stop()

        assert server.versions()[:2] == ["0", "0"]
        assert len(received) == 4
