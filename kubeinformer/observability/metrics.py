"""Prometheus metrics for the informer.

All series are labelled by ``kind`` so several informers can share one
process-wide registry.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

informer_polls_total = Counter(
    "kubeinformer_polls_total",
    "Watch connections opened by Informer.poll()",
    ["kind"],
)

informer_events_total = Counter(
    "kubeinformer_events_total",
    "Watch events delivered to consumers",
    ["kind", "event_type"],
)

informer_errors_total = Counter(
    "kubeinformer_errors_total",
    "Errors observed on watch streams",
    ["kind", "reason"],
)

informer_resyncs_total = Counter(
    "kubeinformer_resyncs_total",
    "Cursor resets performed after a 410 Gone",
    ["kind"],
)

informer_resync_backoff_seconds = Histogram(
    "kubeinformer_resync_backoff_seconds",
    "Time spent backing off before a resync",
    ["kind"],
    buckets=(1, 5, 10, 30, 60),
)


def start_metrics_server(port: int) -> bool:
    """Expose the default registry over HTTP. Port 0 leaves it disabled."""
    if port == 0:
        return False
    start_http_server(port)
    return True
