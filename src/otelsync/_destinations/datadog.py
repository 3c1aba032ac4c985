"""Datadog destination.

The site (e.g. "datadoghq.eu") selects the intake region; the API key is
referenced through ${DATADOG_API_KEY}.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from otelsync._destinations._base import component_name, pipeline_name, require_field
from otelsync.api.types import DestinationType
from otelsync.collector.signals import enabled_signals
from otelsync.exceptions import FieldValidationError

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

SITE_KEY = "DATADOG_SITE"
API_KEY_PLACEHOLDER = "${DATADOG_API_KEY}"
VENDOR = "datadog"


class DatadogAdapter:
    """Datadog adapter. One exporter is shared by all enabled signals."""

    destination_type = DestinationType.DATADOG.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        site = require_field(destination, SITE_KEY).strip()
        if not site or "://" in site or "/" in site:
            raise FieldValidationError(
                f"invalid Datadog site '{site}', expected a bare domain such as datadoghq.com"
            )

        signals = enabled_signals(destination)
        if not signals:
            logger.debug("No signals enabled for Datadog destination '%s'", destination.name)
            return

        exporter = component_name("datadog", VENDOR, destination)
        config.add_exporter(exporter, {"api": {"site": site, "key": API_KEY_PLACEHOLDER}})

        for signal in signals:
            config.add_pipeline(pipeline_name(signal, VENDOR, destination), exporters=[exporter])
