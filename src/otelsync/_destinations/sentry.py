"""Sentry destination.

The DSN is a secret, so no field is read from the destination at all: the
exporter references ${DSN}, which the collector resolves from its
environment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from otelsync._destinations._base import component_name, pipeline_name
from otelsync.api.types import DestinationType, Signal
from otelsync.collector.signals import is_tracing_enabled

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

DSN_PLACEHOLDER = "${DSN}"
VENDOR = "sentry"


class SentryAdapter:
    destination_type = DestinationType.SENTRY.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        if not is_tracing_enabled(destination):
            logger.debug(
                "Sentry destination '%s' is not enabled for any supported signal, skipping",
                destination.name,
            )
            return

        exporter = component_name("sentry", VENDOR, destination)
        config.add_exporter(exporter, {"dsn": DSN_PLACEHOLDER})
        config.add_pipeline(
            pipeline_name(Signal.TRACES, VENDOR, destination), exporters=[exporter]
        )
