"""Watch-resync engine.

Submodules
----------
version   -- merge_resource_version: combines the stored and incoming cursor.
cursor    -- CursorState: lock-guarded cursor and resync flag shared by informer copies.
resync    -- ResyncController: backoff and cursor reset after a 410 Gone.
intercept -- CursorInterceptor: stream stage that updates CursorState per event.
informer  -- Informer: one watch connection per poll().
"""

from kubeinformer.runtime.cursor import CursorState
from kubeinformer.runtime.informer import Informer, InformerState, PollStream
from kubeinformer.runtime.intercept import CursorInterceptor
from kubeinformer.runtime.resync import ResyncController
from kubeinformer.runtime.version import merge_resource_version

__all__ = [
    "CursorInterceptor",
    "CursorState",
    "Informer",
    "InformerState",
    "PollStream",
    "ResyncController",
    "merge_resource_version",
]
