"""kubeinformer: a resumable Kubernetes watch client.

The informer opens one long-poll watch per ``poll()`` call, tracks the
resourceVersion cursor across calls and recovers from 410 Gone by forcing a
relist on the next poll.
"""

from kubeinformer.exceptions import DeserializationError, InformerError, TransportError
from kubeinformer.models.events import EventType, QueryParams, Status, WatchEvent
from kubeinformer.runtime.informer import Informer, InformerState

__version__ = "0.3.0"

__all__ = [
    "DeserializationError",
    "EventType",
    "Informer",
    "InformerError",
    "InformerState",
    "QueryParams",
    "Status",
    "TransportError",
    "WatchEvent",
    "__version__",
]
