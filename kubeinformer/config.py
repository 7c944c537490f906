"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubeinformer.kinds import SUPPORTED_KINDS
from kubeinformer.observability.logging import LOG_FORMATS
from kubeinformer.models.config import (
    InformerConfig,
    LogConfig,
    MetricsConfig,
    ResyncConfig,
    WatchConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEINFORMER_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float = 0.0) -> float:
    return max(float(_env(key, str(default))), min_val)


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def _validate_kind(value: str) -> str:
    kind = value.lower()
    if kind not in SUPPORTED_KINDS:
        raise ValueError(f"Unsupported kind: {value}. Must be one of {sorted(SUPPORTED_KINDS)}")
    return kind


def _validate_metrics_port(value: int) -> int:
    if value != 0 and not 1024 <= value <= 65535:
        raise ValueError(f"Invalid metrics port: {value}. Must be 0 or 1024-65535")
    return value


def load_config() -> InformerConfig:
    """Load configuration from KUBEINFORMER_* environment variables."""
    return InformerConfig(
        watch=WatchConfig(
            kind=_validate_kind(_env("KIND", "configmap")),
            namespace=_env("NAMESPACE", ""),
            label_selector=_env("LABEL_SELECTOR", ""),
            field_selector=_env("FIELD_SELECTOR", ""),
            timeout_seconds=_env_int("WATCH_TIMEOUT", 290, min_val=1, max_val=3600),
        ),
        resync=ResyncConfig(
            backoff_seconds=_env_float("RESYNC_BACKOFF", 10.0),
            retry_delay_seconds=_env_float("RETRY_DELAY", 5.0),
            status_interval_seconds=_env_float("STATUS_INTERVAL", 30.0, min_val=1.0),
        ),
        metrics=MetricsConfig(
            port=_validate_metrics_port(_env_int("METRICS_PORT", 0)),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
