"""Memory sizing for the gateway collector.

The memory_limiter processor must trip before the container limit is hit,
and GOMEMLIMIT must sit below the limiter so the Go runtime collects
garbage before the limiter starts refusing data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from otelsync.api.types import GatewaySettings

DEFAULT_REQUEST_MEMORY_MIB = 500
DEFAULT_LIMITER_HEADROOM_MIB = 50
DEFAULT_SPIKE_LIMIT_PERCENT = 20
DEFAULT_GOMEMLIMIT_PERCENT = 80
# Limiter share of the request when the request is too small for the headroom
SMALL_REQUEST_LIMITER_PERCENT = 80
MIN_MEMORY_MIB = 1
MEMORY_LIMITER_CHECK_INTERVAL = "1s"


def _percent_of(value: int, percent: int) -> int:
    return max(MIN_MEMORY_MIB, value * percent // 100)


@dataclass(frozen=True)
class MemorySettings:
    """Resolved memory settings for one reconciliation pass, in MiB."""

    request_mib: int
    limit_mib: int
    limiter_limit_mib: int
    limiter_spike_limit_mib: int
    gomemlimit_mib: int


def memory_settings(settings: GatewaySettings) -> MemorySettings:
    """Resolve memory settings, using defaults for zero or negative overrides."""
    request = settings.request_memory_mib if settings.request_memory_mib > 0 else DEFAULT_REQUEST_MEMORY_MIB
    limit = settings.memory_limit_mib if settings.memory_limit_mib > 0 else request

    limiter_limit = settings.memory_limiter_limit_mib
    if limiter_limit <= 0:
        limiter_limit = request - DEFAULT_LIMITER_HEADROOM_MIB
        if limiter_limit <= 0:
            limiter_limit = _percent_of(request, SMALL_REQUEST_LIMITER_PERCENT)

    spike_limit = settings.memory_limiter_spike_limit_mib
    if spike_limit <= 0:
        spike_limit = _percent_of(limiter_limit, DEFAULT_SPIKE_LIMIT_PERCENT)

    gomemlimit = settings.gomemlimit_mib
    if gomemlimit <= 0:
        gomemlimit = _percent_of(limiter_limit, DEFAULT_GOMEMLIMIT_PERCENT)

    return MemorySettings(
        request_mib=request,
        limit_mib=limit,
        limiter_limit_mib=limiter_limit,
        limiter_spike_limit_mib=spike_limit,
        gomemlimit_mib=gomemlimit,
    )


def memory_limiter_config(memory: MemorySettings) -> dict[str, Any]:
    """Return the memory_limiter processor fragment."""
    return {
        "check_interval": MEMORY_LIMITER_CHECK_INTERVAL,
        "limit_mib": memory.limiter_limit_mib,
        "spike_limit_mib": memory.limiter_spike_limit_mib,
    }
