"""Watch event data structures and query parameters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Generic, TypeAlias, TypeVar

from kubeinformer.exceptions import DeserializationError, InformerError

K = TypeVar("K")

HTTP_GONE = 410


class EventType(StrEnum):
    """Type field of a watch frame."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Status:
    """Error payload the API server sends inside an ERROR frame."""

    code: int
    message: str = ""
    reason: str = ""
    status: str = "Failure"

    @property
    def is_gone(self) -> bool:
        """True when the requested resourceVersion is no longer retained."""
        return self.code == HTTP_GONE

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Status:
        try:
            code = int(data.get("code", 0))
        except (TypeError, ValueError) as exc:
            raise DeserializationError(f"invalid status code: {data.get('code')!r}", raw=data) from exc
        return cls(
            code=code,
            message=str(data.get("message", "")),
            reason=str(data.get("reason", "")),
            status=str(data.get("status", "Failure")),
        )


@dataclass(frozen=True)
class WatchEvent(Generic[K]):
    """A single notification from a watch stream.

    ``object`` is the decoded resource for ADDED/MODIFIED/DELETED and ``None``
    for ERROR, where ``status`` is set instead.  ``raw`` always holds the
    undecoded ``object`` field of the frame.
    """

    type: EventType
    object: K | None = None
    raw: dict[str, Any] = field(default_factory=dict)
    status: Status | None = None

    @classmethod
    def added(cls, obj: K, raw: dict[str, Any] | None = None) -> WatchEvent[K]:
        return cls(EventType.ADDED, obj, raw if raw is not None else _raw_of(obj))

    @classmethod
    def modified(cls, obj: K, raw: dict[str, Any] | None = None) -> WatchEvent[K]:
        return cls(EventType.MODIFIED, obj, raw if raw is not None else _raw_of(obj))

    @classmethod
    def deleted(cls, obj: K, raw: dict[str, Any] | None = None) -> WatchEvent[K]:
        return cls(EventType.DELETED, obj, raw if raw is not None else _raw_of(obj))

    @classmethod
    def error(cls, status: Status, raw: dict[str, Any] | None = None) -> WatchEvent[K]:
        return cls(EventType.ERROR, None, raw or {}, status)

    @property
    def is_error(self) -> bool:
        return self.type is EventType.ERROR

    @property
    def resource_version(self) -> str:
        """resourceVersion carried by the object, or "" when absent."""
        if self.is_error:
            return ""
        return _extract_rv(self.object, self.raw)

    @classmethod
    def from_dict(
        cls,
        frame: Any,
        decoder: Callable[[dict[str, Any]], K] | None = None,
    ) -> WatchEvent[K]:
        """Build an event from a decoded JSON frame.

        Raises:
            DeserializationError: the frame does not have the watch shape, or
                *decoder* rejected the object.
        """
        if not isinstance(frame, dict):
            raise DeserializationError("watch frame is not an object", raw=frame)
        try:
            event_type = EventType(frame.get("type"))
        except ValueError as exc:
            raise DeserializationError(f"unknown watch event type: {frame.get('type')!r}", raw=frame) from exc

        raw = frame.get("object")
        if not isinstance(raw, dict):
            raise DeserializationError("watch frame has no object", raw=frame)

        if event_type is EventType.ERROR:
            return cls.error(Status.from_dict(raw), raw)

        if decoder is None:
            obj: Any = raw
        else:
            try:
                obj = decoder(raw)
            except Exception as exc:
                raise DeserializationError(f"failed to decode {event_type} object: {exc}", raw=frame) from exc
        return cls(event_type, obj, raw)


# A stream item: either an event or an error that occurred mid-stream.
WatchResult: TypeAlias = WatchEvent[Any] | InformerError


@dataclass(frozen=True)
class QueryParams:
    """Parameters for a watch request.

    ``resource_version`` is advisory only: the informer replaces it with its
    tracked cursor on every poll.
    """

    label_selector: str | None = None
    field_selector: str | None = None
    timeout_seconds: int | None = None
    resource_version: str | None = None

    def with_version(self, version: str) -> QueryParams:
        return replace(self, resource_version=version)

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments in kubernetes_asyncio naming, omitting unset options."""
        kwargs: dict[str, Any] = {}
        if self.label_selector:
            kwargs["label_selector"] = self.label_selector
        if self.field_selector:
            kwargs["field_selector"] = self.field_selector
        if self.timeout_seconds is not None:
            kwargs["timeout_seconds"] = self.timeout_seconds
        if self.resource_version is not None:
            kwargs["resource_version"] = self.resource_version
        return kwargs


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _raw_of(obj: Any) -> dict[str, Any]:
    return obj if isinstance(obj, dict) else {}


def _extract_rv(obj: Any, raw: dict[str, Any]) -> str:
    """Extract resourceVersion from a decoded model or fall back to the raw dict."""
    if obj is not None and not isinstance(obj, dict):
        metadata = getattr(obj, "metadata", None)
        rv = getattr(metadata, "resource_version", None) if metadata is not None else None
        if rv:
            return str(rv)
    metadata = raw.get("metadata")
    if isinstance(metadata, dict):
        rv = metadata.get("resourceVersion", "")
        if rv:
            return str(rv)
    return ""
