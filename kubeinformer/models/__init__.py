"""Core data structures for kubeinformer."""

from kubeinformer.models.config import InformerConfig
from kubeinformer.models.events import (
    EventType,
    QueryParams,
    Status,
    WatchEvent,
    WatchResult,
)

__all__ = [
    "EventType",
    "InformerConfig",
    "QueryParams",
    "Status",
    "WatchEvent",
    "WatchResult",
]
