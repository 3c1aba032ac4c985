"""Grafana Cloud Prometheus destination (remote write with basic auth)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from otelsync._destinations._base import (
    component_name,
    extension_name,
    pipeline_name,
    require_field,
)
from otelsync.api.types import DestinationType, Signal
from otelsync.collector.signals import is_metrics_enabled
from otelsync.collector.validators import (
    attribute_projection_statements,
    endpoint_url,
    label_list,
    label_map,
)

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

REMOTE_WRITE_URL_KEY = "GRAFANA_CLOUD_PROMETHEUS_RW_ENDPOINT"
USERNAME_KEY = "GRAFANA_CLOUD_PROMETHEUS_USERNAME"
RESOURCE_ATTRIBUTES_LABELS_KEY = "PROMETHEUS_RESOURCE_ATTRIBUTES_LABELS"
EXTERNAL_LABELS_KEY = "PROMETHEUS_RESOURCE_EXTERNAL_LABELS"

REMOTE_WRITE_PATH = "/api/prom/push"
PASSWORD_PLACEHOLDER = "${GRAFANA_CLOUD_PROMETHEUS_PASSWORD}"
VENDOR = "grafana"


class GrafanaCloudPrometheusAdapter:
    """Grafana Cloud Prometheus adapter.

    The remote write URL is copied from the Grafana console as-is, so its
    path is checked but never filled in.
    """

    destination_type = DestinationType.GRAFANA_CLOUD_PROMETHEUS.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        if not is_metrics_enabled(destination):
            logger.debug(
                "Metrics not enabled for '%s', gateway will not be configured for Grafana Cloud Prometheus",
                destination.name,
            )
            return

        endpoint = endpoint_url(
            require_field(destination, REMOTE_WRITE_URL_KEY),
            path=REMOTE_WRITE_PATH,
            fill_missing_path=False,
        )
        username = require_field(destination, USERNAME_KEY)
        labels = label_list(destination.data.get(RESOURCE_ATTRIBUTES_LABELS_KEY))
        external_labels = label_map(destination.data.get(EXTERNAL_LABELS_KEY))

        auth_extension = extension_name("basicauth", VENDOR, destination)
        config.add_extension(
            auth_extension,
            {"client_auth": {"username": username, "password": PASSWORD_PLACEHOLDER}},
        )

        exporter_config: dict[str, Any] = {
            "endpoint": endpoint,
            "add_metric_suffixes": False,
            "auth": {"authenticator": auth_extension},
        }
        if external_labels:
            exporter_config["external_labels"] = external_labels

        exporter = component_name("prometheusremotewrite", VENDOR, destination)
        config.add_exporter(exporter, exporter_config)

        processors: list[str] = []
        if labels:
            processor = component_name("transform", VENDOR, destination)
            config.add_processor(
                processor,
                {
                    "metric_statements": [
                        {
                            "context": "datapoint",
                            "statements": attribute_projection_statements(labels),
                        }
                    ]
                },
            )
            processors.append(processor)

        config.add_pipeline(
            pipeline_name(Signal.METRICS, VENDOR, destination),
            exporters=[exporter],
            processors=processors,
        )
