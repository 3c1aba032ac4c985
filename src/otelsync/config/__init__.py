"""Operator configuration and input manifest loading."""

from otelsync.config.load import load_config, load_manifest, resolve_config_path

__all__ = ["load_config", "load_manifest", "resolve_config_path"]
