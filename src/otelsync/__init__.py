"""otelsync: collector gateway configuration from destination declarations.

Typical use inside an event-driven controller:

    from otelsync import load_config, sync_gateway
    config = load_config("/etc/otelsync/operator.yaml")
    sync_gateway(cluster, config)
"""

from __future__ import annotations

from otelsync.api import (
    CollectorConfig,
    Destination,
    DestinationType,
    GatewayState,
    ProcessorDeclaration,
    ReconcileResult,
    Signal,
    load_config,
    load_manifest,
    sync_gateway,
    synthesize,
)
from otelsync.exceptions import (
    ConfigurationError,
    SynthesisError,
    UnknownDestinationTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "CollectorConfig",
    "ConfigurationError",
    "Destination",
    "DestinationType",
    "GatewayState",
    "ProcessorDeclaration",
    "ReconcileResult",
    "Signal",
    "SynthesisError",
    "UnknownDestinationTypeError",
    "__version__",
    "load_config",
    "load_manifest",
    "sync_gateway",
    "synthesize",
]
