"""Unit tests for kubeinformer.models.events."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from kubeinformer.exceptions import DeserializationError
from kubeinformer.models.events import EventType, QueryParams, Status, WatchEvent

from .conftest import make_obj

# ---------------------------------------------------------------------------
# WatchEvent.from_dict
# ---------------------------------------------------------------------------


class TestFromDict:
    def test_added_frame(self) -> None:
        obj = make_obj("5")
        event = WatchEvent.from_dict({"type": "ADDED", "object": obj})
        assert event.type is EventType.ADDED
        assert event.object is obj
        assert event.raw is obj
        assert event.status is None

    @pytest.mark.parametrize("event_type", ["MODIFIED", "DELETED"])
    def test_other_object_frames(self, event_type: str) -> None:
        event = WatchEvent.from_dict({"type": event_type, "object": make_obj("6")})
        assert event.type == event_type
        assert event.resource_version == "6"

    def test_error_frame_carries_status(self) -> None:
        raw = {"kind": "Status", "status": "Failure", "code": 410, "reason": "Expired", "message": "too old"}
        event = WatchEvent.from_dict({"type": "ERROR", "object": raw})
        assert event.is_error
        assert event.object is None
        assert event.status == Status(code=410, message="too old", reason="Expired", status="Failure")
        assert event.status.is_gone
        assert event.resource_version == ""

    def test_decoder_is_applied_to_objects(self) -> None:
        event = WatchEvent.from_dict({"type": "ADDED", "object": make_obj("3")}, decoder=lambda raw: ("decoded", raw))
        assert event.object[0] == "decoded"  # type: ignore[index]

    def test_decoder_is_not_applied_to_errors(self) -> None:
        def decoder(_raw: dict) -> object:
            raise AssertionError("must not decode status objects")

        event = WatchEvent.from_dict({"type": "ERROR", "object": {"code": 500}}, decoder=decoder)
        assert event.status is not None
        assert event.status.code == 500

    def test_decoder_failure_raises_deserialization_error(self) -> None:
        def decoder(_raw: dict) -> object:
            raise KeyError("spec")

        with pytest.raises(DeserializationError):
            WatchEvent.from_dict({"type": "ADDED", "object": make_obj("3")}, decoder=decoder)

    @pytest.mark.parametrize(
        "frame",
        [
            [],
            {"object": {}},
            {"type": "BOGUS", "object": {}},
            {"type": "ADDED"},
            {"type": "ADDED", "object": "not-a-dict"},
            {"type": "ERROR", "object": {"code": "four-ten"}},
        ],
    )
    def test_malformed_frames(self, frame: object) -> None:
        with pytest.raises(DeserializationError):
            WatchEvent.from_dict(frame)


# ---------------------------------------------------------------------------
# resource_version extraction
# ---------------------------------------------------------------------------


class TestResourceVersion:
    def test_from_raw_dict(self) -> None:
        assert WatchEvent.added(make_obj("77")).resource_version == "77"

    def test_missing_is_empty(self) -> None:
        assert WatchEvent.added(make_obj(None)).resource_version == ""

    def test_from_model_metadata(self) -> None:
        """kubernetes_asyncio models expose metadata.resource_version."""
        model = SimpleNamespace(metadata=SimpleNamespace(resource_version="91"))
        assert WatchEvent(EventType.MODIFIED, model, {}).resource_version == "91"

    def test_model_without_version_falls_back_to_raw(self) -> None:
        model = SimpleNamespace(metadata=SimpleNamespace(resource_version=None))
        assert WatchEvent(EventType.MODIFIED, model, make_obj("12")).resource_version == "12"


# ---------------------------------------------------------------------------
# QueryParams
# ---------------------------------------------------------------------------


class TestQueryParams:
    def test_unset_options_are_omitted(self) -> None:
        assert QueryParams().to_kwargs() == {}

    def test_all_options(self) -> None:
        params = QueryParams(
            label_selector="app=web",
            field_selector="metadata.name=cfg",
            timeout_seconds=30,
            resource_version="12",
        )
        assert params.to_kwargs() == {
            "label_selector": "app=web",
            "field_selector": "metadata.name=cfg",
            "timeout_seconds": 30,
            "resource_version": "12",
        }

    def test_with_version_returns_copy(self) -> None:
        params = QueryParams(label_selector="app=web", resource_version="1")
        updated = params.with_version("0")
        assert updated.resource_version == "0"
        assert updated.label_selector == "app=web"
        assert params.resource_version == "1"
