"""Registry of destination adapters keyed by destination type.

The table is built once at import and is read-only afterwards. Supporting
a new vendor means adding an adapter module and listing it here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from otelsync._destinations._base import DestinationAdapter
from otelsync._destinations.datadog import DatadogAdapter
from otelsync._destinations.grafanacloudloki import GrafanaCloudLokiAdapter
from otelsync._destinations.grafanacloudprometheus import GrafanaCloudPrometheusAdapter
from otelsync._destinations.newrelic import NewRelicAdapter
from otelsync._destinations.quickwit import QuickwitAdapter
from otelsync._destinations.sentry import SentryAdapter
from otelsync._destinations.splunk import SplunkAdapter
from otelsync.exceptions import SynthesisError, UnknownDestinationTypeError


def build_registry(adapters: Iterable[DestinationAdapter]) -> Mapping[str, DestinationAdapter]:
    """Build a read-only type -> adapter mapping.

    Raises:
        SynthesisError: If two adapters claim the same destination type.
    """
    table: dict[str, DestinationAdapter] = {}
    for adapter in adapters:
        key = adapter.destination_type
        if key in table:
            raise SynthesisError(f"Duplicate adapter for destination type '{key}'")
        table[key] = adapter
    return MappingProxyType(table)


ADAPTERS: Mapping[str, DestinationAdapter] = build_registry(
    [
        GrafanaCloudLokiAdapter(),
        GrafanaCloudPrometheusAdapter(),
        NewRelicAdapter(),
        QuickwitAdapter(),
        SentryAdapter(),
        SplunkAdapter(),
        DatadogAdapter(),
    ]
)


def get_adapter(
    destination_type: str,
    registry: Mapping[str, DestinationAdapter] = ADAPTERS,
) -> DestinationAdapter:
    """Return the adapter for `destination_type`.

    Raises:
        UnknownDestinationTypeError: If no adapter is registered.
    """
    try:
        return registry[destination_type]
    except KeyError:
        raise UnknownDestinationTypeError(destination_type) from None
