"""Exception hierarchy for the informer.

Errors that happen while a watch stream is open are yielded to the consumer
as exception instances rather than raised, so one bad frame does not end the
stream.  Only connection setup failures are raised, from ``Informer.poll()``.
"""

from __future__ import annotations

from typing import Any


class InformerError(Exception):
    """Base class for all informer errors."""


class TransportError(InformerError):
    """The watch connection could not be opened or was dropped mid-stream."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DeserializationError(InformerError):
    """A watch frame could not be decoded into the expected type."""

    def __init__(self, message: str, raw: Any = None) -> None:
        super().__init__(message)
        self.raw = raw
