"""Quickwit destination (plain OTLP endpoint, no auth)."""

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

URL_KEY = "QUICKWIT_URL"
VENDOR = "quickwit"


class QuickwitAdapter:
    destination_type = DestinationType.QUICKWIT.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        url = require_field(destination, URL_KEY)

        signals = enabled_signals(destination)
        if not signals:
            logger.debug("No signals enabled for Quickwit destination '%s'", destination.name)
            return

        exporter = component_name("otlp", VENDOR, destination)
        # Quickwit is reached in-cluster over plaintext gRPC
        config.add_exporter(exporter, {"endpoint": url, "tls": {"insecure": True}})

        for signal in signals:
            config.add_pipeline(pipeline_name(signal, VENDOR, destination), exporters=[exporter])
