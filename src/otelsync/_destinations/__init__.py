"""Destination adapters.

Each vendor lives in its own module to keep vendor-specific field names
and config shapes at the edges of the package.
"""

from otelsync._destinations._base import DestinationAdapter
from otelsync._destinations._registry import ADAPTERS, build_registry, get_adapter

__all__ = ["ADAPTERS", "DestinationAdapter", "build_registry", "get_adapter"]
