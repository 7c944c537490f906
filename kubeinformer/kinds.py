"""Supported resource kinds and their kubernetes_asyncio list functions."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kubeinformer.transport.kubernetes import ListFunc


@dataclass(frozen=True)
class KindSpec:
    """How to list one resource kind through kubernetes_asyncio."""

    api: str
    model: str
    cluster_list: str
    namespaced_list: str | None = None

    @property
    def namespaced(self) -> bool:
        return self.namespaced_list is not None


SUPPORTED_KINDS: dict[str, KindSpec] = {
    "configmap": KindSpec(
        "CoreV1Api", "V1ConfigMap", "list_config_map_for_all_namespaces", "list_namespaced_config_map"
    ),
    "secret": KindSpec("CoreV1Api", "V1Secret", "list_secret_for_all_namespaces", "list_namespaced_secret"),
    "pod": KindSpec("CoreV1Api", "V1Pod", "list_pod_for_all_namespaces", "list_namespaced_pod"),
    "service": KindSpec("CoreV1Api", "V1Service", "list_service_for_all_namespaces", "list_namespaced_service"),
    "event": KindSpec("CoreV1Api", "CoreV1Event", "list_event_for_all_namespaces", "list_namespaced_event"),
    "node": KindSpec("CoreV1Api", "V1Node", "list_node"),
    "namespace": KindSpec("CoreV1Api", "V1Namespace", "list_namespace"),
    "deployment": KindSpec(
        "AppsV1Api", "V1Deployment", "list_deployment_for_all_namespaces", "list_namespaced_deployment"
    ),
    "statefulset": KindSpec(
        "AppsV1Api", "V1StatefulSet", "list_stateful_set_for_all_namespaces", "list_namespaced_stateful_set"
    ),
    "daemonset": KindSpec(
        "AppsV1Api", "V1DaemonSet", "list_daemon_set_for_all_namespaces", "list_namespaced_daemon_set"
    ),
    "job": KindSpec("BatchV1Api", "V1Job", "list_job_for_all_namespaces", "list_namespaced_job"),
}


def resolve_list_func(kind: str, namespace: str, api: Any) -> ListFunc:
    """Return the list function on *api* for *kind*, bound to *namespace* if given.

    Raises:
        ValueError: unknown kind, or a namespace was given for a
            cluster-scoped kind.
    """
    spec = SUPPORTED_KINDS.get(kind.lower())
    if spec is None:
        raise ValueError(f"Unsupported kind: {kind}. Must be one of {sorted(SUPPORTED_KINDS)}")
    if not namespace:
        return getattr(api, spec.cluster_list)
    if spec.namespaced_list is None:
        raise ValueError(f"{kind} is cluster-scoped and cannot be watched in namespace {namespace!r}")
    return partial(getattr(api, spec.namespaced_list), namespace=namespace)
