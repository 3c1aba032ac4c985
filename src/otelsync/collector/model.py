"""Merged collector configuration model.

A CollectorConfig is threaded through every adapter call of a synthesis
pass. Adapters only add entries; a second entry under an existing name is
a synthesis bug and raises SynthesisError.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import yaml

from otelsync.api.types import Signal
from otelsync.exceptions import SynthesisError

GenericMap = dict[str, Any]


@dataclass
class Pipeline:
    """An ordered chain of processors ending in exporters for one signal."""

    exporters: list[str]
    processors: list[str] = field(default_factory=list)
    receivers: list[str] = field(default_factory=list)

    def to_dict(self) -> GenericMap:
        return {
            "receivers": list(self.receivers),
            "processors": list(self.processors),
            "exporters": list(self.exporters),
        }


@dataclass
class Service:
    """The collector service section."""

    extensions: list[str] = field(default_factory=list)
    pipelines: dict[str, Pipeline] = field(default_factory=dict)


@dataclass
class CollectorConfig:
    """Collector configuration accumulated during one synthesis pass."""

    receivers: dict[str, GenericMap] = field(default_factory=dict)
    exporters: dict[str, GenericMap] = field(default_factory=dict)
    processors: dict[str, GenericMap] = field(default_factory=dict)
    extensions: dict[str, GenericMap] = field(default_factory=dict)
    service: Service = field(default_factory=Service)

    @staticmethod
    def _add(section: dict[str, GenericMap], kind: str, name: str, fragment: GenericMap) -> None:
        if name in section:
            raise SynthesisError(f"Duplicate {kind} name '{name}'")
        section[name] = fragment

    def add_receiver(self, name: str, fragment: GenericMap) -> None:
        self._add(self.receivers, "receiver", name, fragment)

    def add_exporter(self, name: str, fragment: GenericMap) -> None:
        self._add(self.exporters, "exporter", name, fragment)

    def add_processor(self, name: str, fragment: GenericMap) -> None:
        self._add(self.processors, "processor", name, fragment)

    def add_extension(self, name: str, fragment: GenericMap, *, enable: bool = True) -> None:
        """Add an extension and, by default, enable it on the service."""
        self._add(self.extensions, "extension", name, fragment)
        if enable:
            self.service.extensions.append(name)

    def add_pipeline(
        self,
        name: str,
        *,
        exporters: Iterable[str],
        processors: Iterable[str] = (),
    ) -> None:
        if name in self.service.pipelines:
            raise SynthesisError(f"Duplicate pipeline name '{name}'")
        self.service.pipelines[name] = Pipeline(
            exporters=list(exporters), processors=list(processors)
        )

    def pipelines_for(self, signal: Signal) -> Iterator[tuple[str, Pipeline]]:
        """Yield (name, pipeline) pairs whose name starts with `<signal>/`."""
        prefix = f"{signal.value}/"
        for name, pipeline in self.service.pipelines.items():
            if name == signal.value or name.startswith(prefix):
                yield name, pipeline

    def dangling_references(self) -> list[str]:
        """Return a description of every reference to a missing component."""
        problems: list[str] = []
        for name in self.service.extensions:
            if name not in self.extensions:
                problems.append(f"service extension '{name}' is not defined")
        for pipeline_name, pipeline in self.service.pipelines.items():
            for section, refs, kind in (
                (self.receivers, pipeline.receivers, "receiver"),
                (self.processors, pipeline.processors, "processor"),
                (self.exporters, pipeline.exporters, "exporter"),
            ):
                for ref in refs:
                    if ref not in section:
                        problems.append(
                            f"pipeline '{pipeline_name}' references undefined {kind} '{ref}'"
                        )
            if not pipeline.exporters:
                problems.append(f"pipeline '{pipeline_name}' has no exporters")
        return problems

    def to_dict(self) -> GenericMap:
        """Return the config as plain nested dicts and lists."""
        return {
            "receivers": copy.deepcopy(self.receivers),
            "exporters": copy.deepcopy(self.exporters),
            "processors": copy.deepcopy(self.processors),
            "extensions": copy.deepcopy(self.extensions),
            "service": {
                "extensions": list(self.service.extensions),
                "pipelines": {
                    name: pipeline.to_dict()
                    for name, pipeline in self.service.pipelines.items()
                },
            },
        }

    def to_yaml(self) -> str:
        """Serialize to collector YAML.

        Mapping keys are sorted so the text depends only on content; list
        order (processor chains) is kept as built.
        """
        return yaml.safe_dump(self.to_dict(), sort_keys=True, default_flow_style=False)
