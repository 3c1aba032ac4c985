"""New Relic destination (OTLP gRPC with an api-key header)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from otelsync._destinations._base import component_name, pipeline_name, require_field
from otelsync.api.types import DestinationType
from otelsync.collector.signals import enabled_signals

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

ENDPOINT_KEY = "NEWRELIC_ENDPOINT"
API_KEY_PLACEHOLDER = "${NEWRELIC_API_KEY}"
OTLP_GRPC_PORT = 4317
VENDOR = "newrelic"


class NewRelicAdapter:
    """New Relic adapter. One exporter is shared by all enabled signals."""

    destination_type = DestinationType.NEW_RELIC.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        endpoint = require_field(destination, ENDPOINT_KEY)

        signals = enabled_signals(destination)
        if not signals:
            logger.debug("No signals enabled for New Relic destination '%s'", destination.name)
            return

        exporter = component_name("otlp", VENDOR, destination)
        config.add_exporter(
            exporter,
            {
                "endpoint": f"{endpoint}:{OTLP_GRPC_PORT}",
                "headers": {"api-key": API_KEY_PLACEHOLDER},
            },
        )

        for signal in signals:
            config.add_pipeline(pipeline_name(signal, VENDOR, destination), exporters=[exporter])
