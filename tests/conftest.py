"""Shared pytest configuration and fixtures.

This module provides test fixtures that:
1. Reset OpenTelemetry global state between tests for isolation
2. Capture reconciliation spans with InMemorySpanExporter
3. Build destinations for every built-in vendor
4. Provide a FakeCluster instead of a real cluster client
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generator

import pytest
from opentelemetry import trace as trace_api
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from otelsync.api.types import (
    Destination,
    DestinationType,
    OperatorConfig,
    Signal,
)
from tests.fakes import FakeCluster, gateway_group

if TYPE_CHECKING:
    from pathlib import Path

ALL_SIGNALS = frozenset(Signal)


def _reset_trace_globals() -> None:
    """Reset OpenTelemetry trace globals for test isolation.

    WARNING: Only use this in tests. This accesses internal OTel APIs.
    """
    from opentelemetry.util._once import Once

    current_provider = trace_api.get_tracer_provider()
    shutdown_fn = getattr(current_provider, "shutdown", None)
    if callable(shutdown_fn):
        try:
            shutdown_fn()
        except Exception:  # nosec B110 - cleanup errors should not fail tests
            pass

    trace_api._TRACER_PROVIDER_SET_ONCE = Once()
    trace_api._TRACER_PROVIDER = None
    trace_api._PROXY_TRACER_PROVIDER = trace_api.ProxyTracerProvider()


@pytest.fixture(autouse=True)
def reset_otel_state() -> Generator[None, None, None]:
    """Reset OpenTelemetry global state before and after each test."""
    _reset_trace_globals()
    yield
    _reset_trace_globals()


@pytest.fixture
def in_memory_exporter() -> Generator[InMemorySpanExporter, None, None]:
    """Provide an InMemorySpanExporter installed on the global provider."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: "otelsync-test"}))
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace_api.set_tracer_provider(provider)
    yield exporter
    exporter.clear()


# Minimal valid data per vendor
VALID_DATA: dict[str, dict[str, str]] = {
    DestinationType.GRAFANA_CLOUD_LOKI.value: {
        "GRAFANA_CLOUD_LOKI_ENDPOINT": "https://logs-prod-012.grafana.net",
        "GRAFANA_CLOUD_LOKI_USERNAME": "123456",
    },
    DestinationType.GRAFANA_CLOUD_PROMETHEUS.value: {
        "GRAFANA_CLOUD_PROMETHEUS_RW_ENDPOINT": "https://prometheus-prod-10.grafana.net/api/prom/push",
        "GRAFANA_CLOUD_PROMETHEUS_USERNAME": "654321",
    },
    DestinationType.NEW_RELIC.value: {"NEWRELIC_ENDPOINT": "https://otlp.nr-data.net"},
    DestinationType.QUICKWIT.value: {"QUICKWIT_URL": "quickwit-indexer.quickwit:7281"},
    DestinationType.SENTRY.value: {},
    DestinationType.SPLUNK.value: {"SPLUNK_REALM": "us1"},
    DestinationType.DATADOG.value: {"DATADOG_SITE": "datadoghq.com"},
}


@pytest.fixture
def make_destination() -> Callable[..., Destination]:
    """Factory for destinations with valid vendor data unless overridden.

    Usage:
        dest = make_destination("newrelic", name="nr", signals={Signal.TRACES})
    """

    def _make(
        dest_type: str,
        *,
        name: str | None = None,
        data: dict[str, str] | None = None,
        signals: frozenset[Signal] | set[Signal] = ALL_SIGNALS,
    ) -> Destination:
        return Destination(
            name=name or f"{dest_type}-dest",
            type=dest_type,
            data=dict(VALID_DATA.get(dest_type, {})) if data is None else data,
            signals=frozenset(signals),
        )

    return _make


@pytest.fixture
def all_vendor_destinations(make_destination: Callable[..., Destination]) -> list[Destination]:
    """One valid destination per built-in vendor, all signals requested."""
    return [make_destination(t.value) for t in DestinationType]


@pytest.fixture
def operator_config() -> OperatorConfig:
    return OperatorConfig(namespace="observability")


@pytest.fixture
def fake_cluster() -> FakeCluster:
    """A cluster with a gateway group, one ready replica and no destinations."""
    return FakeCluster(groups=[gateway_group()], ready_replicas=1)


@pytest.fixture
def valid_operator_config_content() -> str:
    """Return valid operator YAML config content for tests."""
    return """namespace: observability

gateway:
  name: otel-gateway
  image: otel/opentelemetry-collector-contrib:0.98.0
  image_pull_secrets:
    - regcred

validation:
  mode: permissive

logging:
  level: debug
"""


@pytest.fixture
def valid_operator_config_file(tmp_path: "Path", valid_operator_config_content: str) -> "Path":
    """Create a valid operator config file and return its path."""
    config_path = tmp_path / "operator.yaml"
    config_path.write_text(valid_operator_config_content)
    return config_path
