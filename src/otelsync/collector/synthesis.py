"""Config synthesis: destinations and processor declarations -> collector config.

This module is responsible for:
- Seeding the baseline receivers, processors and extensions
- Merging processor declarations ahead of vendor processors
- Dispatching every destination to its adapter
- Checking the result for dangling references
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from otelsync._destinations import ADAPTERS, get_adapter
from otelsync._internal.logging import log_destination_skipped
from otelsync.api.types import Signal
from otelsync.collector.model import CollectorConfig
from otelsync.exceptions import (
    DestinationConfigError,
    ProcessorDeclarationError,
    SynthesisError,
)

if TYPE_CHECKING:
    from otelsync._destinations import DestinationAdapter
    from otelsync.api.types import Destination, ProcessorDeclaration

logger = logging.getLogger(__name__)

OTLP_RECEIVER = "otlp"
BATCH_PROCESSOR = "batch"
MEMORY_LIMITER_PROCESSOR = "memory_limiter"
DEFAULT_EXTENSIONS = ("health_check", "zpages")


def new_collector_config(memory_limiter: Mapping[str, Any] | None = None) -> CollectorConfig:
    """Create a config holding only the baseline components.

    Args:
        memory_limiter: memory_limiter processor fragment, or None to run
            the gateway without one.
    """
    config = CollectorConfig()
    config.add_receiver(
        OTLP_RECEIVER,
        {
            "protocols": {
                "grpc": {"endpoint": "0.0.0.0:4317"},
                "http": {"endpoint": "0.0.0.0:4318"},
            }
        },
    )
    if memory_limiter is not None:
        config.add_processor(MEMORY_LIMITER_PROCESSOR, dict(memory_limiter))
    config.add_processor(BATCH_PROCESSOR, {})
    for extension in DEFAULT_EXTENSIONS:
        config.add_extension(extension, {})
    return config


def _validate_declaration(declaration: ProcessorDeclaration) -> None:
    if not declaration.name or not declaration.type:
        raise ProcessorDeclarationError(
            f"Processor declaration requires a name and a type, got "
            f"name={declaration.name!r} type={declaration.type!r}"
        )
    if not declaration.signals:
        raise ProcessorDeclarationError(
            f"Processor '{declaration.component_name}' does not target any signal"
        )
    unknown = [s for s in declaration.signals if not isinstance(s, Signal)]
    if unknown:
        raise ProcessorDeclarationError(
            f"Processor '{declaration.component_name}' targets unknown signals {unknown!r}"
        )
    if not isinstance(declaration.config, Mapping):
        raise ProcessorDeclarationError(
            f"Processor '{declaration.component_name}' config must be a mapping, "
            f"got {type(declaration.config).__name__}"
        )


def _merge_processor_declarations(
    config: CollectorConfig, declarations: Iterable[ProcessorDeclaration]
) -> dict[Signal, list[str]]:
    """Insert declared processors and return their names per signal, in order."""
    active = [d for d in declarations if not d.disabled]
    for declaration in active:
        _validate_declaration(declaration)

    by_signal: dict[Signal, list[str]] = {signal: [] for signal in Signal}
    for declaration in sorted(active, key=lambda d: (d.order_hint, d.component_name)):
        name = declaration.component_name
        try:
            config.add_processor(name, dict(declaration.config))
        except SynthesisError as e:
            raise ProcessorDeclarationError(str(e)) from e
        for signal in Signal:
            if signal in declaration.signals:
                by_signal[signal].append(name)
    return by_signal


def _apply_destination(
    adapter: DestinationAdapter,
    destination: Destination,
    config: CollectorConfig,
    strict: bool,
) -> None:
    try:
        adapter.modify_config(destination, config)
    except DestinationConfigError as e:
        if strict:
            raise SynthesisError(
                f"Destination '{destination.name}' ({destination.type}) is invalid: {e}"
            ) from e
        log_destination_skipped(destination.name, destination.type, e)


def _finalize_pipelines(
    config: CollectorConfig, declared: dict[Signal, list[str]]
) -> None:
    """Attach receivers and wrap vendor processors with the shared ones."""
    head = [MEMORY_LIMITER_PROCESSOR] if MEMORY_LIMITER_PROCESSOR in config.processors else []
    for signal in Signal:
        for _, pipeline in config.pipelines_for(signal):
            pipeline.receivers = [OTLP_RECEIVER]
            pipeline.processors = [
                *head,
                *declared[signal],
                *pipeline.processors,
                BATCH_PROCESSOR,
            ]


def synthesize(
    destinations: Iterable[Destination],
    processors: Iterable[ProcessorDeclaration] = (),
    *,
    memory_limiter: Mapping[str, Any] | None = None,
    strict: bool = False,
    registry: Mapping[str, DestinationAdapter] = ADAPTERS,
) -> CollectorConfig:
    """Build the merged collector config for one synthesis pass.

    Destinations are visited in name order and processor declarations in
    (order_hint, name) order, so identical inputs always produce identical
    output whatever order the cluster listed them in.

    Args:
        destinations: Current destinations. Never modified.
        processors: Processor declarations to run before vendor processors.
        memory_limiter: memory_limiter processor fragment for the baseline.
        strict: If True, a misconfigured destination fails the whole pass
            instead of being skipped.
        registry: Destination type -> adapter table.

    Returns:
        The merged CollectorConfig.

    Raises:
        UnknownDestinationTypeError: If a destination type has no adapter.
        ProcessorDeclarationError: If a processor declaration is malformed.
        SynthesisError: On duplicate destination names, name collisions or
            dangling references, or any destination error in strict mode.
    """
    config = new_collector_config(memory_limiter)
    declared = _merge_processor_declarations(config, processors)

    ordered = sorted(destinations, key=lambda d: d.name)
    seen: set[str] = set()
    for destination in ordered:
        if destination.name in seen:
            raise SynthesisError(f"Duplicate destination name '{destination.name}'")
        seen.add(destination.name)

        adapter = get_adapter(destination.type, registry)
        _apply_destination(adapter, destination, config, strict)

    _finalize_pipelines(config, declared)

    problems = config.dangling_references()
    if problems:
        raise SynthesisError("Invalid collector config: " + "; ".join(problems))

    logger.debug(
        "Synthesized collector config: %d exporters, %d pipelines from %d destinations",
        len(config.exporters),
        len(config.service.pipelines),
        len(ordered),
    )
    return config
