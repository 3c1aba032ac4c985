"""Signal gating for destinations.

A destination joins a signal's pipelines only when its vendor can receive
that signal and the user enabled it on the destination.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from otelsync.api.types import SUPPORTED_SIGNALS, Signal

if TYPE_CHECKING:
    from otelsync.api.types import Destination


def is_signal_enabled(destination: Destination, signal: Signal) -> bool:
    """Return True if `signal` should be exported to `destination`."""
    supported = SUPPORTED_SIGNALS.get(destination.type, frozenset())
    return signal in supported and signal in destination.signals


def is_tracing_enabled(destination: Destination) -> bool:
    return is_signal_enabled(destination, Signal.TRACES)


def is_metrics_enabled(destination: Destination) -> bool:
    return is_signal_enabled(destination, Signal.METRICS)


def is_logging_enabled(destination: Destination) -> bool:
    return is_signal_enabled(destination, Signal.LOGS)


def enabled_signals(destination: Destination) -> list[Signal]:
    """Return enabled signals in the fixed traces, metrics, logs order."""
    return [signal for signal in Signal if is_signal_enabled(destination, signal)]
