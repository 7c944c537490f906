"""Transports that open watch connections for the informer."""

from kubeinformer.transport.base import Transport
from kubeinformer.transport.kubernetes import KubernetesTransport

__all__ = ["KubernetesTransport", "Transport"]
