"""Application bootstrap for kubeinformer.

Wires the components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → K8s client → metrics → transport
              → informer → runner

Shutdown stops the runner first and closes the K8s client last.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from kubeinformer.config import load_config
from kubeinformer.exceptions import InformerError
from kubeinformer.kinds import SUPPORTED_KINDS, resolve_list_func
from kubeinformer.models.config import InformerConfig
from kubeinformer.models.events import QueryParams, WatchResult
from kubeinformer.observability.logging import bind_watch_context, get_logger, setup_logging
from kubeinformer.observability.metrics import start_metrics_server
from kubeinformer.runner import InformerRunner
from kubeinformer.runtime.informer import Informer
from kubeinformer.transport.kubernetes import KubernetesTransport, model_decoder

if TYPE_CHECKING:
    import structlog


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class InformerApp:
    """Application root.  Owns the K8s client, the informer and its runner.

    ``stop()`` is safe to call on an app that was never started.
    """

    def __init__(self, config: InformerConfig | None = None) -> None:
        self.config = config
        self.informer: Informer | None = None
        self._api_client: Any = None
        self._runner: InformerRunner | None = None
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a component cannot start.
        """
        # --- 1. Configuration -------------------------------------------
        if self.config is None:
            self.config = load_config()

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level, self.config.log.format)
        bind_watch_context(self.config.watch.kind, self.config.watch.namespace)
        self._log = get_logger("app")
        self._log.info("kubeinformer starting", version=_kubeinformer_version())

        # --- 3. Kubernetes client ----------------------------------------
        await self._start_k8s_client()

        # --- 4. Metrics exporter -----------------------------------------
        if start_metrics_server(self.config.metrics.port):
            self._log.info("metrics exporter started", port=self.config.metrics.port)

        # --- 5. Transport + informer -------------------------------------
        self._build_informer()

        # --- 6. Supervisory loop -----------------------------------------
        assert self.informer is not None
        self._runner = InformerRunner(
            self.informer,
            self._handle,
            retry_delay=self.config.resync.retry_delay_seconds,
            status_interval=self.config.resync.status_interval_seconds,
        )
        await self._runner.start()

        self._running = True
        self._log.info("kubeinformer started", kind=self.config.watch.kind, namespace=self.config.watch.namespace)

    async def _start_k8s_client(self) -> None:
        """Initialise the kubernetes-asyncio client from in-cluster config or kubeconfig."""
        assert self._log is not None
        try:
            import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            try:
                # load_incluster_config() is synchronous in kubernetes-asyncio
                k8s_config.load_incluster_config()
                self._log.info("k8s client configured from in-cluster service account")
            except k8s_config.ConfigException:
                # load_kube_config() is async in kubernetes-asyncio
                await k8s_config.load_kube_config()
                self._log.info("k8s client configured from kubeconfig")

            self._api_client = k8s_client.ApiClient()
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    def _build_informer(self) -> None:
        assert self.config is not None
        watch_cfg = self.config.watch
        try:
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            spec = SUPPORTED_KINDS[watch_cfg.kind]
            api = getattr(k8s_client, spec.api)(self._api_client)
            list_func = resolve_list_func(watch_cfg.kind, watch_cfg.namespace, api)
        except Exception as exc:
            raise _ComponentError("informer", exc) from exc

        transport = KubernetesTransport(
            list_func,
            decoder=model_decoder(self._api_client, spec.model),
            name=watch_cfg.kind,
        )
        params = QueryParams(
            label_selector=watch_cfg.label_selector or None,
            field_selector=watch_cfg.field_selector or None,
            timeout_seconds=watch_cfg.timeout_seconds,
        )
        self.informer = Informer(
            transport,
            params,
            name=watch_cfg.kind,
            backoff_seconds=self.config.resync.backoff_seconds,
        )

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    async def _handle(self, item: WatchResult) -> None:
        """Log every stream item; the informer has already updated its cursor."""
        log = self._log or get_logger("app")
        if isinstance(item, InformerError):
            log.warning("stream item error", error=str(item), error_type=type(item).__name__)
            return
        if item.status is not None:
            log.warning("server error event", code=item.status.code, reason=item.status.reason)
            return
        metadata = item.raw.get("metadata", {})
        log.info(
            "event",
            event_type=item.type.value,
            namespace=metadata.get("namespace", ""),
            name=metadata.get("name", ""),
            resource_version=item.resource_version,
        )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop the runner, then close the K8s client."""
        log = self._log or get_logger("app")
        self._running = False
        if self._runner is not None:
            await self._runner.stop()
            self._runner = None
        if self._api_client is not None:
            try:
                await self._api_client.close()
            except Exception as exc:
                log.debug("k8s client close raised (non-fatal)", error=str(exc))
            self._api_client = None
        log.info("kubeinformer stopped")


def _kubeinformer_version() -> str:
    from kubeinformer import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: InformerConfig | None = None) -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = InformerApp(config)
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app.running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app.running:
            await app.stop()
