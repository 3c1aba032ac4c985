"""Integration tests for gateway reconciliation against a fake cluster.

Requirements covered:
- No gateway group: the pass writes nothing
- ConfigMap, Service and Deployment are applied in order, then status
- Readiness follows the Deployment's ready replicas
- Repeated passes with unchanged input do not change the ConfigMap
- Synthesis and cluster errors abort the pass and propagate unchanged
- Each pass is recorded as a span
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import pytest
import yaml
from opentelemetry.trace import StatusCode

from otelsync.api.types import (
    Destination,
    DestinationType,
    GatewaySettings,
    OperatorConfig,
    ProcessorDeclaration,
    Signal,
    ValidationConfig,
)
from otelsync.exceptions import SynthesisError, UnknownDestinationTypeError
from otelsync.gateway import GatewayState, memory_settings, sync_gateway
from otelsync.gateway.reconcile import CONFIG_MAP_KEY, config_checksum
from tests.fakes import FakeCluster, FakeClusterError, gateway_group, node_collector_group

if TYPE_CHECKING:
    from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

MakeDestination = Callable[..., Destination]


def _rendered(cluster: FakeCluster, name: str = "otel-gateway") -> dict:
    return yaml.safe_load(cluster.config_maps[name].data[CONFIG_MAP_KEY])


@pytest.mark.integration
class TestNoGateway:
    def test_empty_cluster_is_left_untouched(self, operator_config: OperatorConfig) -> None:
        """
        GIVEN a cluster without collectors groups
        WHEN a pass runs
        THEN nothing is written and the result says there is no gateway
        """
        cluster = FakeCluster()

        result = sync_gateway(cluster, operator_config)

        assert result.state is GatewayState.NO_GATEWAY
        assert result.ready is None
        assert cluster.writes == 0
        assert cluster.calls == ["list_collectors_groups"]

    def test_node_collector_alone_is_not_a_gateway(self, operator_config: OperatorConfig) -> None:
        cluster = FakeCluster(groups=[node_collector_group()], ready_replicas=1)

        result = sync_gateway(cluster, operator_config)

        assert result.state is GatewayState.NO_GATEWAY
        assert cluster.writes == 0


@pytest.mark.integration
class TestSync:
    def test_writes_in_order(
        self, fake_cluster: FakeCluster, operator_config: OperatorConfig
    ) -> None:
        sync_gateway(fake_cluster, operator_config)

        writes = [c for c in fake_cluster.calls if c.startswith(("apply_", "patch_"))]
        assert writes == [
            "apply_config_map",
            "apply_service",
            "apply_deployment",
            "patch_gateway_status",
        ]

    def test_config_map_holds_synthesized_config(
        self,
        fake_cluster: FakeCluster,
        operator_config: OperatorConfig,
        make_destination: MakeDestination,
    ) -> None:
        """
        GIVEN a gateway group, a New Relic destination and a sampler declaration
        WHEN a pass runs
        THEN the ConfigMap carries the merged config with the memory limiter
             first and the declared sampler in the traces pipeline
        """
        fake_cluster.destinations = [
            make_destination(DestinationType.NEW_RELIC.value, name="nr")
        ]
        fake_cluster.processors = [
            ProcessorDeclaration(
                name="ten-percent",
                type="probabilistic_sampler",
                signals=frozenset({Signal.TRACES}),
                config={"sampling_percentage": 10},
            )
        ]

        sync_gateway(fake_cluster, operator_config)

        rendered = _rendered(fake_cluster)
        assert rendered["exporters"]["otlp/newrelic-nr"]["headers"] == {
            "api-key": "${NEWRELIC_API_KEY}"
        }
        assert rendered["processors"]["memory_limiter"]["limit_mib"] == 450
        assert rendered["service"]["pipelines"]["traces/newrelic-nr"]["processors"] == [
            "memory_limiter",
            "probabilistic_sampler/ten-percent",
            "batch",
        ]

    def test_deployment_spec(
        self, fake_cluster: FakeCluster, operator_config: OperatorConfig
    ) -> None:
        fake_cluster.settings = GatewaySettings(request_memory_mib=1050)
        operator_config.gateway.image_pull_secrets = ["regcred"]

        sync_gateway(fake_cluster, operator_config)

        (spec,) = fake_cluster.deployments
        config_text = fake_cluster.config_maps["otel-gateway"].data[CONFIG_MAP_KEY]
        assert spec.name == "otel-gateway"
        assert spec.namespace == "observability"
        assert spec.config_map_name == "otel-gateway"
        assert spec.config_checksum == config_checksum(config_text)
        assert spec.image_pull_secrets == ("regcred",)
        assert spec.memory == memory_settings(GatewaySettings(request_memory_mib=1050))

    @pytest.mark.parametrize("replicas, ready", [(0, False), (1, True), (3, True)])
    def test_status_follows_ready_replicas(
        self, operator_config: OperatorConfig, replicas: int, ready: bool
    ) -> None:
        cluster = FakeCluster(groups=[gateway_group()], ready_replicas=replicas)

        result = sync_gateway(cluster, operator_config)

        assert result.state is GatewayState.SYNCED
        assert result.ready is ready
        assert cluster.status_patches == [ready]

    def test_repeated_pass_does_not_change_config(
        self,
        fake_cluster: FakeCluster,
        operator_config: OperatorConfig,
        all_vendor_destinations: list[Destination],
    ) -> None:
        """
        GIVEN a pass has already run
        WHEN a second pass runs with identical input
        THEN the ConfigMap is unchanged and the Deployment checksum is stable
        """
        fake_cluster.destinations = all_vendor_destinations

        first = sync_gateway(fake_cluster, operator_config)
        fake_cluster.destinations = list(reversed(all_vendor_destinations))
        second = sync_gateway(fake_cluster, operator_config)

        assert first.config_changed is True
        assert second.config_changed is False
        assert fake_cluster.config_maps["otel-gateway"].revisions == 1
        assert fake_cluster.deployments[0].config_checksum == fake_cluster.deployments[1].config_checksum

    def test_broken_destination_does_not_block_the_rest(
        self,
        fake_cluster: FakeCluster,
        operator_config: OperatorConfig,
        make_destination: MakeDestination,
    ) -> None:
        fake_cluster.destinations = [
            make_destination(DestinationType.SPLUNK.value, name="broken", data={}),
            make_destination(DestinationType.SENTRY.value, name="ok"),
        ]

        result = sync_gateway(fake_cluster, operator_config)

        assert result.state is GatewayState.SYNCED
        rendered = _rendered(fake_cluster)
        assert list(rendered["exporters"]) == ["sentry/sentry-ok"]


@pytest.mark.integration
class TestFailures:
    def test_synthesis_error_writes_nothing(
        self,
        fake_cluster: FakeCluster,
        operator_config: OperatorConfig,
        make_destination: MakeDestination,
    ) -> None:
        fake_cluster.destinations = [make_destination("no-such-vendor", name="x", data={})]

        with pytest.raises(UnknownDestinationTypeError):
            sync_gateway(fake_cluster, operator_config)

        assert fake_cluster.writes == 0

    def test_strict_mode_fails_on_broken_destination(
        self, fake_cluster: FakeCluster, make_destination: MakeDestination
    ) -> None:
        config = OperatorConfig(
            namespace="observability", validation=ValidationConfig(mode="strict")
        )
        fake_cluster.destinations = [
            make_destination(DestinationType.SPLUNK.value, name="broken", data={})
        ]

        with pytest.raises(SynthesisError, match="broken"):
            sync_gateway(fake_cluster, config)

        assert fake_cluster.writes == 0

    @pytest.mark.parametrize(
        "fail_on, expected_calls",
        [
            ("apply_config_map", ["apply_config_map"]),
            ("apply_service", ["apply_config_map", "apply_service"]),
            (
                "apply_deployment",
                ["apply_config_map", "apply_service", "apply_deployment"],
            ),
        ],
    )
    def test_cluster_error_aborts_remaining_steps(
        self,
        operator_config: OperatorConfig,
        fail_on: str,
        expected_calls: list[str],
    ) -> None:
        """
        GIVEN a cluster call that fails
        WHEN a pass runs
        THEN the error propagates unchanged and later steps never run
        """
        cluster = FakeCluster(groups=[gateway_group()], ready_replicas=1, fail_on=fail_on)

        with pytest.raises(FakeClusterError, match=fail_on):
            sync_gateway(cluster, operator_config)

        writes = [c for c in cluster.calls if c.startswith(("apply_", "patch_"))]
        assert writes == expected_calls
        assert cluster.status_patches == []

    def test_read_error_propagates(self, operator_config: OperatorConfig) -> None:
        cluster = FakeCluster(groups=[gateway_group()], fail_on="list_destinations")

        with pytest.raises(FakeClusterError):
            sync_gateway(cluster, operator_config)

        assert cluster.writes == 0


@pytest.mark.integration
class TestTracing:
    def test_successful_pass_is_recorded(
        self,
        in_memory_exporter: "InMemorySpanExporter",
        fake_cluster: FakeCluster,
        operator_config: OperatorConfig,
        make_destination: MakeDestination,
    ) -> None:
        fake_cluster.destinations = [make_destination(DestinationType.SENTRY.value, name="s")]

        sync_gateway(fake_cluster, operator_config)

        (span,) = in_memory_exporter.get_finished_spans()
        assert span.name == "gateway.sync"
        assert span.attributes["otelsync.gateway.state"] == "synced"
        assert span.attributes["otelsync.gateway.ready"] is True
        assert span.attributes["otelsync.destinations"] == 1
        assert span.status.status_code != StatusCode.ERROR

    def test_no_gateway_pass_is_recorded(
        self, in_memory_exporter: "InMemorySpanExporter", operator_config: OperatorConfig
    ) -> None:
        sync_gateway(FakeCluster(), operator_config)

        (span,) = in_memory_exporter.get_finished_spans()
        assert span.attributes["otelsync.gateway.state"] == "no-gateway"
        assert "otelsync.gateway.ready" not in span.attributes

    def test_failed_pass_is_recorded(
        self, in_memory_exporter: "InMemorySpanExporter", operator_config: OperatorConfig
    ) -> None:
        cluster = FakeCluster(groups=[gateway_group()], fail_on="apply_service")

        with pytest.raises(FakeClusterError):
            sync_gateway(cluster, operator_config)

        (span,) = in_memory_exporter.get_finished_spans()
        assert span.attributes["otelsync.gateway.state"] == "sync-failed"
        assert span.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)
