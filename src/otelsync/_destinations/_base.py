"""DestinationAdapter protocol and component naming helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from otelsync.exceptions import MissingFieldError

if TYPE_CHECKING:
    from otelsync.api.types import Destination, Signal
    from otelsync.collector.model import CollectorConfig


class DestinationAdapter(Protocol):
    """Protocol that all destination adapters must satisfy."""

    @property
    def destination_type(self) -> str:
        """Destination type identifier (e.g., 'newrelic', 'splunk')."""
        ...

    def modify_config(self, destination: Destination, config: CollectorConfig) -> None:
        """Add this destination's components to `config`.

        Implementations validate every field before writing, so a raised
        DestinationConfigError leaves `config` untouched.
        """
        ...


def require_field(destination: Destination, key: str) -> str:
    """Return `destination.data[key]` or raise MissingFieldError."""
    try:
        return destination.data[key]
    except KeyError:
        raise MissingFieldError(key) from None


def component_name(kind: str, vendor: str, destination: Destination) -> str:
    """Exporter/processor name: `<kind>/<vendor>-<destination>`."""
    return f"{kind}/{vendor}-{destination.name}"


def pipeline_name(signal: Signal, vendor: str, destination: Destination) -> str:
    """Pipeline name: `<signal>/<vendor>-<destination>`."""
    return f"{signal.value}/{vendor}-{destination.name}"


def extension_name(kind: str, vendor: str, destination: Destination) -> str:
    """Extension name: `<kind>/<vendor><destination>`."""
    return f"{kind}/{vendor}{destination.name}"
