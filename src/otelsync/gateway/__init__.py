"""Gateway reconciliation against the cluster."""

from otelsync.gateway.cluster import DeploymentSpec, GatewayCluster
from otelsync.gateway.reconcile import (
    GatewayState,
    ReconcileResult,
    find_gateway,
    sync_gateway,
)
from otelsync.gateway.sizing import MemorySettings, memory_limiter_config, memory_settings

__all__ = [
    "DeploymentSpec",
    "GatewayCluster",
    "GatewayState",
    "MemorySettings",
    "ReconcileResult",
    "find_gateway",
    "memory_limiter_config",
    "memory_settings",
    "sync_gateway",
]
