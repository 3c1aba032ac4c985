"""Splunk Observability destination (SAPM traces)."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from otelsync._destinations._base import component_name, pipeline_name, require_field
from otelsync.api.types import DestinationType, Signal
from otelsync.collector.signals import is_tracing_enabled
from otelsync.exceptions import FieldValidationError

if TYPE_CHECKING:
    from otelsync.api.types import Destination
    from otelsync.collector.model import CollectorConfig

logger = logging.getLogger(__name__)

REALM_KEY = "SPLUNK_REALM"
ACCESS_TOKEN_PLACEHOLDER = "${SPLUNK_ACCESS_TOKEN}"
VENDOR = "splunk"

# Realms are short identifiers such as "us0" or "eu1"
REALM_PATTERN = re.compile(r"^[a-z0-9-]+$")


class SplunkAdapter:
    destination_type = DestinationType.SPLUNK.value

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        realm = require_field(destination, REALM_KEY).strip()
        if not REALM_PATTERN.match(realm):
            raise FieldValidationError(f"invalid Splunk realm '{realm}'")

        if not is_tracing_enabled(destination):
            logger.debug("Tracing not enabled for Splunk destination '%s'", destination.name)
            return

        exporter = component_name("sapm", VENDOR, destination)
        config.add_exporter(
            exporter,
            {
                "access_token": ACCESS_TOKEN_PLACEHOLDER,
                "endpoint": f"https://ingest.{realm}.signalfx.com/v2/trace",
            },
        )
        config.add_pipeline(
            pipeline_name(Signal.TRACES, VENDOR, destination), exporters=[exporter]
        )
