"""Collector configuration synthesis."""

from otelsync.collector.model import CollectorConfig, Pipeline, Service
from otelsync.collector.synthesis import new_collector_config, synthesize

__all__ = ["CollectorConfig", "Pipeline", "Service", "new_collector_config", "synthesize"]
