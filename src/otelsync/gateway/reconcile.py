"""Gateway reconciliation: keep the cluster gateway in step with destinations.

One call to sync_gateway() is one pass: fetch -> synthesize -> apply ->
report readiness. Passes share no state, so the surrounding controller can
run one per cluster event and retry failed passes from scratch.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from otelsync.api.types import CollectorsGroupRole
from otelsync.collector import synthesize
from otelsync.gateway.cluster import DeploymentSpec
from otelsync.gateway.sizing import memory_limiter_config, memory_settings

if TYPE_CHECKING:
    from otelsync.api.types import CollectorsGroup, OperatorConfig
    from otelsync.gateway.cluster import GatewayCluster

logger = logging.getLogger(__name__)

CONFIG_MAP_KEY = "collector-conf"
TRACER_NAME = "otelsync.gateway"


class GatewayState(str, Enum):
    """Outcome of a reconciliation pass."""

    NO_GATEWAY = "no-gateway"
    SYNCED = "synced"
    SYNC_FAILED = "sync-failed"


@dataclass(frozen=True)
class ReconcileResult:
    """Result of a successful pass.

    `ready` is None when there was no gateway to configure.
    """

    state: GatewayState
    ready: bool | None = None
    config_changed: bool = False


def find_gateway(groups: list[CollectorsGroup]) -> CollectorsGroup | None:
    """Return the first collectors group with the cluster gateway role."""
    for group in groups:
        if group.role == CollectorsGroupRole.CLUSTER_GATEWAY:
            return group
    return None


def config_checksum(config_text: str) -> str:
    return hashlib.sha256(config_text.encode("utf-8")).hexdigest()


def sync_gateway(cluster: GatewayCluster, config: OperatorConfig) -> ReconcileResult:
    """Run one reconciliation pass.

    Args:
        cluster: Cluster client.
        config: Operator configuration.

    Returns:
        ReconcileResult with state NO_GATEWAY or SYNCED.

    Raises:
        SynthesisError: If the collector config cannot be built. Nothing
            has been written to the cluster in that case.
        Exception: Any cluster client error, unchanged. Steps after the
            failing call are not run.
    """
    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span("gateway.sync") as span:
        try:
            result = _sync(cluster, config, span)
        except Exception as e:
            logger.error("Gateway sync failed: %s", e)
            span.set_attribute("otelsync.gateway.state", GatewayState.SYNC_FAILED.value)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise

        span.set_attribute("otelsync.gateway.state", result.state.value)
        if result.ready is not None:
            span.set_attribute("otelsync.gateway.ready", result.ready)
        return result


def _sync(
    cluster: GatewayCluster, config: OperatorConfig, span: trace.Span
) -> ReconcileResult:
    gateway = find_gateway(cluster.list_collectors_groups())
    if gateway is None:
        logger.debug("Gateway collectors group doesn't exist, nothing to sync")
        return ReconcileResult(state=GatewayState.NO_GATEWAY)

    destinations = cluster.list_destinations()
    processors = cluster.list_processors()
    settings = cluster.get_settings()
    span.set_attribute("otelsync.destinations", len(destinations))
    span.set_attribute("otelsync.processors", len(processors))

    logger.info(
        "Syncing gateway %s/%s with %d destinations",
        gateway.namespace,
        gateway.name,
        len(destinations),
    )

    memory = memory_settings(settings)
    collector_config = synthesize(
        destinations,
        processors,
        memory_limiter=memory_limiter_config(memory),
        strict=config.is_strict,
    )
    config_text = collector_config.to_yaml()

    config_map_name = config.gateway.name
    changed = cluster.apply_config_map(gateway, config_map_name, {CONFIG_MAP_KEY: config_text})
    cluster.apply_service(gateway)
    status = cluster.apply_deployment(
        gateway,
        DeploymentSpec(
            name=config.gateway.name,
            namespace=config.namespace,
            image=config.gateway.image,
            config_map_name=config_map_name,
            config_checksum=config_checksum(config_text),
            memory=memory,
            image_pull_secrets=tuple(config.gateway.image_pull_secrets),
        ),
    )

    # Readiness follows the workload, not the synthesis outcome
    ready = status.ready_replicas > 0
    cluster.patch_gateway_status(gateway, ready)
    logger.info("Gateway synced (ready=%s, config changed=%s)", ready, changed)

    return ReconcileResult(state=GatewayState.SYNCED, ready=ready, config_changed=changed)
