"""Public types for otelsync.

These types are part of the stable public API and follow semver guarantees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Signal(str, Enum):
    """Telemetry signal kinds a pipeline can carry."""

    TRACES = "traces"
    METRICS = "metrics"
    LOGS = "logs"


class DestinationType(str, Enum):
    """Built-in destination vendors."""

    GRAFANA_CLOUD_LOKI = "grafanacloudloki"
    GRAFANA_CLOUD_PROMETHEUS = "grafanacloudprometheus"
    NEW_RELIC = "newrelic"
    QUICKWIT = "quickwit"
    SENTRY = "sentry"
    SPLUNK = "splunk"
    DATADOG = "datadog"


# Signals each vendor is able to receive
SUPPORTED_SIGNALS: dict[str, frozenset[Signal]] = {
    DestinationType.GRAFANA_CLOUD_LOKI.value: frozenset({Signal.LOGS}),
    DestinationType.GRAFANA_CLOUD_PROMETHEUS.value: frozenset({Signal.METRICS}),
    DestinationType.NEW_RELIC.value: frozenset(Signal),
    DestinationType.QUICKWIT.value: frozenset({Signal.TRACES, Signal.LOGS}),
    DestinationType.SENTRY.value: frozenset({Signal.TRACES}),
    DestinationType.SPLUNK.value: frozenset({Signal.TRACES}),
    DestinationType.DATADOG.value: frozenset(Signal),
}


@dataclass(frozen=True)
class Destination:
    """A user-declared export target.

    `data` holds vendor-specific fields keyed by fixed names such as
    NEWRELIC_ENDPOINT. Secrets never appear here; adapters reference them
    through environment placeholders resolved by the collector.
    """

    name: str
    type: str
    data: dict[str, str] = field(default_factory=dict)
    signals: frozenset[Signal] = frozenset()


@dataclass(frozen=True)
class ProcessorDeclaration:
    """A pre-shaped processor to insert ahead of vendor processors.

    The collector component name is `<type>/<name>`. Lower `order_hint`
    values come first in every pipeline of a matching signal.
    """

    name: str
    type: str
    signals: frozenset[Signal]
    config: dict[str, Any] = field(default_factory=dict)
    order_hint: int = 0
    disabled: bool = False

    @property
    def component_name(self) -> str:
        return f"{self.type}/{self.name}"


class CollectorsGroupRole(str, Enum):
    """Role of a collectors group in the cluster."""

    CLUSTER_GATEWAY = "CLUSTER_GATEWAY"
    NODE_COLLECTOR = "NODE_COLLECTOR"


@dataclass(frozen=True)
class CollectorsGroup:
    """Cluster record describing a group of collectors."""

    name: str
    namespace: str
    role: CollectorsGroupRole


@dataclass(frozen=True)
class GatewaySettings:
    """Global gateway sizing overrides, in MiB. Zero means default."""

    request_memory_mib: int = 0
    memory_limit_mib: int = 0
    memory_limiter_limit_mib: int = 0
    memory_limiter_spike_limit_mib: int = 0
    gomemlimit_mib: int = 0


@dataclass(frozen=True)
class DeploymentStatus:
    """Observed state of the gateway Deployment."""

    ready_replicas: int = 0


@dataclass
class GatewayConfig:
    """Gateway workload configuration."""

    name: str = "otel-gateway"
    image: str = "otel/opentelemetry-collector-contrib:0.98.0"
    image_pull_secrets: list[str] = field(default_factory=list)


@dataclass
class ValidationConfig:
    """Validation mode configuration."""

    mode: str = "permissive"  # "strict" | "permissive"


@dataclass
class LoggingConfig:
    """Operator log output configuration."""

    level: str = "INFO"


@dataclass
class OperatorConfig:
    """Complete operator configuration."""

    namespace: str
    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def is_strict(self) -> bool:
        """Return True if validation mode is strict."""
        return self.validation.mode == "strict"
