"""Narrow interface to the cluster API used by the reconciliation loop.

Implementations wrap a real cluster client. Every method is a single
atomic call; errors are raised as-is and never retried here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from otelsync.api.types import (
        CollectorsGroup,
        DeploymentStatus,
        Destination,
        GatewaySettings,
        ProcessorDeclaration,
    )
    from otelsync.gateway.sizing import MemorySettings


@dataclass(frozen=True)
class DeploymentSpec:
    """Desired shape of the gateway Deployment.

    `config_checksum` changes whenever the collector config does, so the
    manifest builder can roll the pods on config changes.
    """

    name: str
    namespace: str
    image: str
    config_map_name: str
    config_checksum: str
    memory: MemorySettings
    image_pull_secrets: tuple[str, ...] = ()


class GatewayCluster(Protocol):
    """Protocol that cluster clients must satisfy."""

    def list_collectors_groups(self) -> list[CollectorsGroup]:
        ...

    def list_destinations(self) -> list[Destination]:
        ...

    def list_processors(self) -> list[ProcessorDeclaration]:
        ...

    def get_settings(self) -> GatewaySettings:
        """Return the global settings record."""
        ...

    def apply_config_map(
        self, gateway: CollectorsGroup, name: str, data: dict[str, str]
    ) -> bool:
        """Create or overwrite the ConfigMap. Return True if it changed."""
        ...

    def apply_service(self, gateway: CollectorsGroup) -> None:
        ...

    def apply_deployment(
        self, gateway: CollectorsGroup, spec: DeploymentSpec
    ) -> DeploymentStatus:
        """Create or overwrite the Deployment and return its current status."""
        ...

    def patch_gateway_status(self, gateway: CollectorsGroup, ready: bool) -> None:
        ...
