"""Public API for otelsync.

This module re-exports the stable public interface:
- synthesize() - Build a collector config from destinations
- sync_gateway() - Run one reconciliation pass against a cluster
- load_config() / load_manifest() - File-based inputs
- Destination and related types
"""

from __future__ import annotations

from otelsync.api.types import (
    SUPPORTED_SIGNALS,
    CollectorsGroup,
    CollectorsGroupRole,
    DeploymentStatus,
    Destination,
    DestinationType,
    GatewayConfig,
    GatewaySettings,
    LoggingConfig,
    OperatorConfig,
    ProcessorDeclaration,
    Signal,
    ValidationConfig,
)
from otelsync.collector import CollectorConfig, synthesize
from otelsync.config import load_config, load_manifest
from otelsync.gateway import GatewayState, ReconcileResult, sync_gateway

__all__ = [
    "synthesize",
    "sync_gateway",
    "load_config",
    "load_manifest",
    "CollectorConfig",
    "GatewayState",
    "ReconcileResult",
    "Signal",
    "DestinationType",
    "SUPPORTED_SIGNALS",
    "Destination",
    "ProcessorDeclaration",
    "CollectorsGroup",
    "CollectorsGroupRole",
    "GatewaySettings",
    "DeploymentStatus",
    "OperatorConfig",
    "GatewayConfig",
    "ValidationConfig",
    "LoggingConfig",
]
