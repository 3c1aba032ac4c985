"""Grafana Cloud Loki destination.

Logs are shipped with the collector's loki exporter, authenticated with a
basicauth extension. The Grafana console shows the Loki endpoint either as
a bare data-source host or as a promtail push URL with credentials baked
in; only the former is accepted and the push path is appended to it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from otelsync._destinations._base import (
    component_name,
    extension_name,
    pipeline_name,
    require_field,
)
from otelsync.api.types import DestinationType, Signal
from otelsync.collector.signals import is_logging_enabled
from otelsync.collector.validators import (
    attribute_projection_statements,
    endpoint_url,
    label_list,
)

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

ENDPOINT_KEY = "GRAFANA_CLOUD_LOKI_ENDPOINT"
USERNAME_KEY = "GRAFANA_CLOUD_LOKI_USERNAME"
LABELS_KEY = "GRAFANA_CLOUD_LOKI_LABELS"

LOKI_PUSH_PATH = "/loki/api/v1/push"
PASSWORD_PLACEHOLDER = "${GRAFANA_CLOUD_LOKI_PASSWORD}"
VENDOR = "grafana"


class GrafanaCloudLokiAdapter:
    """Grafana Cloud Loki adapter."""

    destination_type = DestinationType.GRAFANA_CLOUD_LOKI.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        if not is_logging_enabled(destination):
            logger.debug(
                "Logging not enabled for '%s', gateway will not be configured for Grafana Cloud Loki",
                destination.name,
            )
            return

        endpoint = endpoint_url(require_field(destination, ENDPOINT_KEY), path=LOKI_PUSH_PATH)
        username = require_field(destination, USERNAME_KEY)
        labels = label_list(destination.data.get(LABELS_KEY))

        auth_extension = extension_name("basicauth", VENDOR, destination)
        config.add_extension(
            auth_extension,
            {"client_auth": {"username": username, "password": PASSWORD_PLACEHOLDER}},
        )

        exporter = component_name("loki", VENDOR, destination)
        config.add_exporter(
            exporter,
            {"endpoint": endpoint, "auth": {"authenticator": auth_extension}},
        )

        processors: list[str] = []
        if labels:
            processor = component_name("transform", VENDOR, destination)
            config.add_processor(
                processor,
                {
                    "log_statements": [
                        {
                            "context": "log",
                            "statements": attribute_projection_statements(labels),
                        }
                    ]
                },
            )
            processors.append(processor)

        config.add_pipeline(
            pipeline_name(Signal.LOGS, VENDOR, destination),
            exporters=[exporter],
            processors=processors,
        )
