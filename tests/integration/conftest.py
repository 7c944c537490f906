"""Shared fixtures for kubeinformer integration tests.

FakeApiServer plays the part of a kubernetes_asyncio list function: each
watch call records its keyword arguments and serves the next scripted body
as newline-delimited JSON, the way the API server frames a watch response.
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from kubernetes_asyncio.client.exceptions import ApiException

# ---------------------------------------------------------------------------
# Frame helpers
# ---------------------------------------------------------------------------


def config_map(name: str, rv: str, namespace: str = "default") -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": name, "namespace": namespace, "resourceVersion": rv},
        "data": {"key": name},
    }


def frame(event_type: str, obj: dict[str, Any]) -> bytes:
    return json.dumps({"type": event_type, "object": obj}).encode() + b"\n"


def gone_frame(rv: str = "5") -> bytes:
    status = {
        "kind": "Status",
        "apiVersion": "v1",
        "status": "Failure",
        "message": f"too old resource version: {rv} (1200)",
        "reason": "Expired",
        "code": 410,
    }
    return frame("ERROR", status)


# ---------------------------------------------------------------------------
# Fake API server
# ---------------------------------------------------------------------------


class FakeApiServer:
    """Scripted watch endpoint.

    Each entry of the script is a list of body lines, or an int HTTP status
    that the request fails with.
    """

    def __init__(self, *script: list[bytes] | int) -> None:
        self._script = list(script)
        self.requests: list[dict[str, Any]] = []
        self.responses: list[MagicMock] = []

    async def __call__(self, **kwargs: Any) -> MagicMock:
        self.requests.append(kwargs)
        step: list[bytes] | int = self._script.pop(0) if self._script else 503
        if isinstance(step, int):
            raise ApiException(status=step, reason="scripted failure")
        resp = MagicMock()
        resp.content.readline = AsyncMock(side_effect=[*step, b""])
        self.responses.append(resp)
        return resp

    def versions(self) -> list[str | None]:
        return [r.get("resource_version") for r in self.requests]

