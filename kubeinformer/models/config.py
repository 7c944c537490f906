"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WatchConfig:
    """What to watch and how long each watch connection stays open."""

    kind: str = "configmap"
    namespace: str = ""
    label_selector: str = ""
    field_selector: str = ""
    timeout_seconds: int = 290


@dataclass
class ResyncConfig:
    """Recovery timing for the informer and its supervisory loop."""

    backoff_seconds: float = 10.0
    retry_delay_seconds: float = 5.0
    status_interval_seconds: float = 30.0


@dataclass
class MetricsConfig:
    """Prometheus exporter configuration. Port 0 disables the exporter."""

    port: int = 0


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class InformerConfig:
    """Top-level kubeinformer configuration."""

    watch: WatchConfig = field(default_factory=WatchConfig)
    resync: ResyncConfig = field(default_factory=ResyncConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    log: LogConfig = field(default_factory=LogConfig)
